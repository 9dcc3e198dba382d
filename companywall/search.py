# search.py
# -*- coding: utf-8 -*-

"""
Resolve a free-text or OIB query to one companywall.hr detail page.
"""

import logging
from typing import List, Optional
from urllib.parse import urljoin, urlencode

from bs4 import BeautifulSoup

from companywall.config import BASE_URL, SEARCH_URL, DETAIL_PATH

logger = logging.getLogger(__name__)

RESULT_ITEM_CLASS = "result-item"
BLOCK_TAGS = ["li", "article", "tr"]


def build_search_url(query: str) -> str:
    return f"{SEARCH_URL}?{urlencode({'q': query})}"


def _surrounding_block(anchor):
    """The result container an anchor sits in, falling back to its parent."""
    return (
        anchor.find_parent(class_=RESULT_ITEM_CLASS)
        or anchor.find_parent(BLOCK_TAGS)
        or anchor.parent
        or anchor
    )


def _detail_anchors(soup: BeautifulSoup) -> List:
    """Anchors pointing at a company detail page, in document order."""
    return [anchor for anchor in soup.find_all("a", href=True) if DETAIL_PATH in anchor["href"]]


def pick_detail_href(html: str, query: str, soup: BeautifulSoup = None) -> Optional[str]:
    """
    Pick the detail-page URL from a search results page.

    The first detail-page anchor whose result block mentions the query wins;
    other links inside a result (maps, follow buttons) never match. Otherwise the
    first ".result-item" anchor, then the first anchor pointing at a detail
    page. Selectors may need adjusting if companywall changes its layout.

    Returns:
        Absolute detail URL, or None when the page lists no companies
    """
    if soup is None:
        soup = BeautifulSoup(html, "html.parser")

    needle = (query or "").strip().lower()
    if needle:
        for anchor in _detail_anchors(soup):
            block_text = _surrounding_block(anchor).get_text(" ", strip=True).lower()
            if needle in block_text:
                logger.debug(f"[SEARCH] Anchor matched query '{needle}': {anchor['href']}")
                return urljoin(BASE_URL, anchor["href"])

    fallback = soup.select_one(f".{RESULT_ITEM_CLASS} a[href]") or soup.select_one(f'a[href*="{DETAIL_PATH}"]')
    if fallback is None:
        return None
    logger.debug(f"[SEARCH] No anchor mentions the query, using first result: {fallback['href']}")
    return urljoin(BASE_URL, fallback["href"])


def resolve_detail_url(fetcher, query: str) -> Optional[str]:
    """
    Fetch the search page for query and resolve one detail URL.

    Args:
        fetcher: ProxyFetcher used for the search page
        query: Company name or OIB

    Returns:
        Detail URL, or None if the results page has no company anchors

    Raises:
        AllProxiesExhausted: If the search page could not be fetched
    """
    search_url = build_search_url(query)
    html = fetcher.fetch_via_proxy(search_url)
    detail_url = pick_detail_href(html, query)
    if detail_url is None:
        logger.info(f"[SEARCH] No company anchors in results for '{query}'")
        return None
    logger.info(f"[SEARCH] Resolved '{query}' -> {detail_url}")
    return detail_url
