# extractor.py
# -*- coding: utf-8 -*-

"""
Field extraction for companywall.hr detail pages.

Each field is resolved by an ordered list of strategies, from most to least
trusted: JSON-LD structured data, labeled DOM lookup, regex over the
flattened page text and finally the "-" sentinel. The first strategy that
yields a candidate surviving sanitize_candidate() wins.

Every strategy is a plain function of (soup | text) so a broken heuristic can
be tested on its own when the site layout changes.
"""

import json
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional

from bs4 import BeautifulSoup, Comment, NavigableString

from companywall.config import MAX_PHONES, MIN_PHONE_DIGITS
from companywall.constants import (
    SENTINEL,
    OIB_PATTERN,
    OIB_TOKEN_PATTERN,
    MBS_PATTERN,
    MBS_SHAPE,
    FOUNDED_PATTERN,
    SIZE_PATTERN,
    RATING_SHAPE,
    RATING_PATTERN,
    EMAIL_PATTERN,
    PHONE_PATTERN,
    IBAN_PATTERN,
    DATE_PATTERN,
    STATUS_KEYWORDS,
    BLOCKADE_KEYWORDS,
    BLOCKADE_NEGATIONS,
)
from companywall.exceptions import NotACompanyPage, IdentifierMismatch
from companywall.financials import extract_financials, extract_average_salary, locate_financial_block
from companywall.models import BankAccount, CompanyRecord
from companywall.sanitize import sanitize_candidate, collapse_whitespace
from companywall.utils import digits_only, is_oib

logger = logging.getLogger(__name__)

Strategy = Callable[[], Optional[str]]

ORG_TYPES = {"Organization", "LocalBusiness", "Corporation", "ProfessionalService"}
SKIP_TAGS = {"script", "style", "noscript", "template"}
SOURCE_HOST = "companywall"
NON_COMPANY_HOSTS = [
    "schema.org", "google.", "googleapis", "gstatic", "w3.org",
    "facebook.com", "twitter.com", "linkedin.com", "instagram.com", "youtube.com",
    "allorigins", "codetabs", "corsproxy",
]

DIRECTOR_LABELS = [
    "Direktor",
    "Direktorica",
    "Zastupnik",
    "Član uprave",
    "Predsjednik uprave",
    "Predsjednica",
    "Likvidator",
]
OWNER_LABELS = ["Vlasnici", "Vlasnik", "Osnivač"]
TAX_DEBT_LABELS = ["Dug prema državi", "Porezni dug", "Dugovanje prema državi"]

BANK_NAME_PATTERN = re.compile(
    r"([A-ZČĆŽŠĐ][\w&.'-]*(?:\s+[\w&.'-]+){0,3}?\s+[Bb]anka?(?:\s+[A-ZČĆŽŠĐ][\w-]*)?\s+d\.d\."
    r"|[A-ZČĆŽŠĐ]\w*bank\w*(?:\s+[A-ZČĆŽŠĐ]\w*)?\s+d\.d\.)"
)
OPENED_PATTERN = re.compile(r"otvoren\w*\s*:?\s*(" + DATE_PATTERN.pattern + r")", re.I)
CLOSED_PATTERN = re.compile(r"zatvoren\w*\s*:?\s*(" + DATE_PATTERN.pattern + r")", re.I)
ACCOUNT_STATUSES = ["Blokiran", "Zatvoren", "Neaktivan", "Aktivan"]


# --- generic helpers -------------------------------------------------------

def first_candidate(strategies: Iterable[Strategy]) -> str:
    """Run strategies left to right and return the first non-empty result."""
    for strategy in strategies:
        value = strategy()
        if value:
            return value
    return ""


def flatten_text(soup: BeautifulSoup) -> str:
    """Visible page text with all whitespace collapsed to single spaces."""
    parts = []
    for string in soup.find_all(string=True):
        if isinstance(string, Comment):
            continue
        if string.parent is not None and string.parent.name in SKIP_TAGS:
            continue
        parts.append(string)
    return collapse_whitespace(" ".join(parts))


def _text_of(node) -> str:
    if node is None:
        return ""
    if isinstance(node, NavigableString):
        return collapse_whitespace(str(node))
    return collapse_whitespace(node.get_text(" ", strip=True))


# --- JSON-LD ---------------------------------------------------------------

def _walk_json_ld(node: Any) -> Iterable[Dict[str, Any]]:
    if isinstance(node, list):
        for item in node:
            yield from _walk_json_ld(item)
    elif isinstance(node, dict):
        if "@graph" in node:
            yield from _walk_json_ld(node["@graph"])
        types = node.get("@type")
        if isinstance(types, str):
            types = [types]
        if types and ORG_TYPES.intersection(types):
            yield node


def parse_json_ld(soup: BeautifulSoup) -> List[Dict[str, Any]]:
    """Organization-like objects from every JSON-LD block, including @graph members."""
    orgs: List[Dict[str, Any]] = []
    for script in soup.find_all("script", type="application/ld+json"):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw)
        except (ValueError, TypeError) as e:
            logger.debug(f"[PARSING] Skipping invalid JSON-LD block: {e}")
            continue
        orgs.extend(_walk_json_ld(data))
    if orgs:
        logger.debug(f"[PARSING] JSON-LD: {len(orgs)} organization objects")
    return orgs


def _format_address(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return _format_address(value[0]) if value else ""
    if isinstance(value, dict):
        country = value.get("addressCountry")
        if isinstance(country, dict):
            country = country.get("name")
        parts = [
            value.get("streetAddress"),
            value.get("postalCode"),
            value.get("addressLocality"),
            country,
        ]
        return ", ".join(str(p).strip() for p in parts if p)
    return ""


def json_ld_value(orgs: List[Dict[str, Any]], key: str) -> str:
    """First usable value for key across the JSON-LD organizations."""
    for org in orgs:
        value = org.get(key)
        if key == "address":
            value = _format_address(value)
        elif isinstance(value, list):
            value = value[0] if value else None
        if isinstance(value, (int, float)):
            value = str(value)
        if isinstance(value, str):
            cleaned = sanitize_candidate(collapse_whitespace(value))
            if cleaned:
                return cleaned
    return ""


def json_ld_values(orgs: List[Dict[str, Any]], key: str) -> List[str]:
    values: List[str] = []
    for org in orgs:
        value = org.get(key)
        if isinstance(value, str):
            values.append(value)
        elif isinstance(value, list):
            values.extend(v for v in value if isinstance(v, str))
    return values


# --- labeled DOM -----------------------------------------------------------

def _is_leafish(el) -> bool:
    return len(el.find_all(True, recursive=False)) <= 2


def _inline_value(el, label: str) -> str:
    text = collapse_whitespace(el.get_text(" ", strip=True))
    idx = text.find(label)
    if idx < 0:
        return ""
    match = re.match(r"\s*:\s*(.+)", text[idx + len(label):])
    return match.group(1) if match else ""


def _structural_sibling(el) -> str:
    for node in (el, el.parent):
        if node is None:
            continue
        if node.name == "dt":
            return _text_of(node.find_next_sibling("dd"))
        if node.name in ("th", "td"):
            return _text_of(node.find_next_sibling("td"))
    return ""


def _next_sibling(el) -> str:
    for sibling in el.next_siblings:
        if isinstance(sibling, Comment):
            continue
        text = _text_of(sibling)
        if text:
            return text
    return ""


def _parent_next_sibling(el) -> str:
    if el.parent is None:
        return ""
    return _text_of(el.parent.find_next_sibling())


def find_labeled_values(soup: BeautifulSoup, label: str) -> List[str]:
    """
    Value next to every occurrence of label.

    For each leaf-ish element whose text contains label, try in order: inline
    "label: value", dt->dd / th->td, the next sibling, the parent's next
    sibling. The first candidate surviving sanitize_candidate() is taken.
    """
    values: List[str] = []
    for string in soup.find_all(string=lambda s: s and label in s):
        if isinstance(string, Comment):
            continue
        el = string.parent
        if el is None or el.name in SKIP_TAGS or not _is_leafish(el):
            continue

        attempts: List[Strategy] = [
            lambda: _inline_value(el, label),
            lambda: _structural_sibling(el),
            lambda: _next_sibling(el),
            lambda: _parent_next_sibling(el),
        ]
        for attempt in attempts:
            candidate = sanitize_candidate(attempt())
            if candidate and candidate.lower() != label.lower():
                values.append(candidate)
                break
    return values


def find_labeled_value(soup: BeautifulSoup, label: str) -> str:
    values = find_labeled_values(soup, label)
    return values[0] if values else ""


def _labeled(soup: BeautifulSoup, *labels: str) -> Strategy:
    """Strategy returning the value of the first label found on the page."""
    def strategy() -> str:
        for label in labels:
            value = find_labeled_value(soup, label)
            if value:
                return value
        return ""
    return strategy


# --- field extractors ------------------------------------------------------

def extract_oib(soup: BeautifulSoup, text: str, orgs: List[Dict[str, Any]]) -> str:
    """
    National id (OIB): labeled regex over the text, then JSON-LD taxID/vatID,
    then a labeled DOM value that is exactly 11 digits.

    A bare 11-digit number elsewhere on the page is never taken as the OIB;
    it may belong to an owner or a related company.
    """
    def from_regex() -> str:
        match = OIB_PATTERN.search(text)
        return match.group(1) if match else ""

    def from_json_ld() -> str:
        for key in ("taxID", "vatID"):
            value = re.sub(r"^HR", "", json_ld_value(orgs, key)).strip()
            if is_oib(value):
                return value
        return ""

    def from_label() -> str:
        for value in find_labeled_values(soup, "OIB"):
            if is_oib(value.strip()):
                return value.strip()
        return ""

    return first_candidate([from_regex, from_json_ld, from_label])


def extract_mbs(soup: BeautifulSoup, text: str, oib: str) -> str:
    """Court registry number; dropped when its digits equal the OIB."""
    def from_regex() -> str:
        match = MBS_PATTERN.search(text)
        return match.group(1).strip() if match else ""

    def from_label() -> str:
        for label in ("MBS", "Matični broj subjekta"):
            for value in find_labeled_values(soup, label):
                if MBS_SHAPE.match(value):
                    return value
        return ""

    mbs = first_candidate([from_regex, from_label])
    if mbs and digits_only(mbs) == oib:
        logger.warning(f"[PARSING] MBS equals OIB ({oib}), discarding")
        return ""
    return mbs


def extract_name(soup: BeautifulSoup, orgs: List[Dict[str, Any]], query: str) -> str:
    def from_h1() -> str:
        return sanitize_candidate(_text_of(soup.find("h1")))

    return first_candidate([
        lambda: json_ld_value(orgs, "name"),
        from_h1,
        lambda: _og_title(soup),
    ]) or query


def _og_title(soup: BeautifulSoup) -> str:
    meta = soup.find("meta", attrs={"property": "og:title"})
    if not meta or not meta.get("content"):
        return ""
    title = re.split(r"\s+[|–-]\s+CompanyWall", meta["content"], flags=re.I)[0]
    return sanitize_candidate(collapse_whitespace(title))


def extract_full_name(soup: BeautifulSoup, orgs: List[Dict[str, Any]], name: str) -> str:
    return first_candidate([
        lambda: json_ld_value(orgs, "legalName"),
        lambda: _og_title(soup),
    ]) or name


def extract_address(soup: BeautifulSoup, orgs: List[Dict[str, Any]]) -> str:
    def from_map_link() -> str:
        link = soup.select_one('a[href*="maps.google"], a[href*="google.com/maps"]')
        return sanitize_candidate(_text_of(link)) if link else ""

    return first_candidate([
        lambda: json_ld_value(orgs, "address"),
        _labeled(soup, "Adresa", "Sjedište"),
        from_map_link,
    ])


def extract_founded(soup: BeautifulSoup, text: str, orgs: List[Dict[str, Any]]) -> str:
    def from_regex() -> str:
        match = FOUNDED_PATTERN.search(text)
        return match.group(1).strip() if match else ""

    return first_candidate([
        lambda: json_ld_value(orgs, "foundingDate"),
        _labeled(soup, "Datum osnivanja", "Osnovano"),
        from_regex,
    ])


def extract_status(soup: BeautifulSoup, text: str) -> str:
    def from_keywords() -> str:
        for keyword in STATUS_KEYWORDS:
            if re.search(r"\b" + re.escape(keyword) + r"\b", text):
                return keyword
        return ""

    return first_candidate([_labeled(soup, "Status"), from_keywords])


def extract_size(soup: BeautifulSoup, text: str) -> str:
    def from_regex() -> str:
        match = SIZE_PATTERN.search(text)
        return match.group(1).strip() if match else ""

    return first_candidate([_labeled(soup, "Veličina poduzeća", "Veličina"), from_regex])


def extract_rating(soup: BeautifulSoup, text: str) -> str:
    def from_label() -> str:
        value = find_labeled_value(soup, "Rating")
        return value if RATING_SHAPE.match(value) else ""

    def from_regex() -> str:
        match = RATING_PATTERN.search(text)
        return match.group(1) if match else ""

    return first_candidate([from_label, from_regex])


def detect_blocked(text: str) -> bool:
    """
    True when the page reports an active payment blockade.

    A negation anywhere on the page ("Nije u blokadi") wins over any
    blockade keyword found elsewhere.
    """
    if not text:
        return False
    if any(pattern.search(text) for pattern in BLOCKADE_NEGATIONS):
        return False
    return any(pattern.search(text) for pattern in BLOCKADE_KEYWORDS)


def normalize_phone(value: str) -> str:
    """Phone number with separators kept, or "" if it has fewer than 9 digits."""
    if not value:
        return ""
    cleaned = "".join(c for c in value if c.isdigit() or c in "+-/() ")
    cleaned = collapse_whitespace(cleaned).strip("-/ ")
    if len(digits_only(cleaned)) < MIN_PHONE_DIGITS:
        return ""
    return cleaned


def extract_phones(
    soup: BeautifulSoup,
    text: str,
    orgs: List[Dict[str, Any]],
    exclude: Iterable[str] = ()
) -> List[str]:
    """Distinct phone numbers (by digits), at most MAX_PHONES."""
    raw: List[str] = []
    raw.extend(json_ld_values(orgs, "telephone"))
    for link in soup.select('a[href^="tel:"]'):
        raw.append(link["href"][len("tel:"):] or _text_of(link))
    for label in ("Telefon", "Mobitel"):
        raw.extend(find_labeled_values(soup, label))
    raw.extend(match.group(0) for match in PHONE_PATTERN.finditer(text))

    excluded = {digits_only(e) for e in exclude if e}
    phones: List[str] = []
    seen = set()
    for value in raw:
        # a bare 11-digit run is an OIB (owner, related company), not a phone
        if OIB_TOKEN_PATTERN.fullmatch(value.strip()):
            continue
        phone = normalize_phone(value)
        digits = digits_only(phone)
        if not phone or digits in seen or digits in excluded:
            continue
        seen.add(digits)
        phones.append(phone)
        if len(phones) >= MAX_PHONES:
            break
    return phones


def is_valid_email(value: str) -> bool:
    if not value or "@" not in value:
        return False
    lowered = value.lower()
    return "://" not in lowered and not lowered.startswith("www.")


def extract_email(soup: BeautifulSoup, text: str, orgs: List[Dict[str, Any]]) -> str:
    def from_mailto() -> str:
        link = soup.select_one('a[href^="mailto:"]')
        if not link:
            return ""
        return link["href"][len("mailto:"):].split("?")[0].strip() or _text_of(link)

    def from_regex() -> str:
        match = EMAIL_PATTERN.search(text)
        return match.group(0) if match else ""

    for strategy in (
        lambda: json_ld_value(orgs, "email"),
        from_mailto,
        _labeled(soup, "E-mail", "Email"),
        from_regex,
    ):
        value = strategy()
        if value:
            match = EMAIL_PATTERN.search(value)
            if match and is_valid_email(match.group(0)):
                return match.group(0)
    return ""


def normalize_website(value: str) -> str:
    if not value:
        return ""
    value = value.strip()
    if value.lower().startswith("www."):
        value = "https://" + value
    lowered = value.lower()
    if "http" not in lowered or SOURCE_HOST in lowered:
        return ""
    if any(host in lowered for host in NON_COMPANY_HOSTS):
        return ""
    return value


def extract_website(soup: BeautifulSoup, orgs: List[Dict[str, Any]]) -> str:
    def from_anchors() -> str:
        for link in soup.select('a[href^="http"]'):
            website = normalize_website(link["href"])
            if website and "maps" not in website.lower():
                return website
        return ""

    return first_candidate([
        lambda: normalize_website(json_ld_value(orgs, "url")),
        lambda: normalize_website(find_labeled_value(soup, "Web")),
        lambda: normalize_website(find_labeled_value(soup, "Internetska stranica")),
        from_anchors,
    ])


def extract_directors(soup: BeautifulSoup) -> List[str]:
    directors: List[str] = []
    for label in DIRECTOR_LABELS:
        for value in find_labeled_values(soup, label):
            name = value.strip()
            if name and name not in directors:
                directors.append(name)
    return directors


def extract_description(soup: BeautifulSoup, orgs: List[Dict[str, Any]]) -> str:
    for org in orgs:
        value = org.get("description")
        if isinstance(value, str) and value.strip():
            return collapse_whitespace(value)
    meta = soup.find("meta", attrs={"name": "description"})
    if meta and meta.get("content"):
        return collapse_whitespace(meta["content"])
    return ""


def extract_bank_accounts(text: str) -> List[BankAccount]:
    """IBANs with the opening date, bank and status printed after each of them."""
    accounts: List[BankAccount] = []
    seen = set()
    matches = list(IBAN_PATTERN.finditer(text or ""))
    for idx, match in enumerate(matches):
        iban = match.group(0).replace(" ", "")
        if iban in seen:
            continue
        seen.add(iban)

        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(text)
        window = text[match.end():min(end, match.end() + 200)]

        opened = OPENED_PATTERN.search(window)
        closed = CLOSED_PATTERN.search(window)
        bank = BANK_NAME_PATTERN.search(window)
        status = next((s for s in ACCOUNT_STATUSES if re.search(r"\b" + s + r"\b", window)), "")

        accounts.append(BankAccount(
            iban=iban,
            opened=opened.group(1) if opened else "",
            bank=bank.group(1).strip() if bank else "",
            status=status,
            closed=closed.group(1) if closed else None,
        ))
    return accounts


# --- record assembly -------------------------------------------------------

def parse_company(html: str, query: str = "", source_url: Optional[str] = None) -> CompanyRecord:
    """
    Build a CompanyRecord from a detail page.

    Args:
        html: Detail page HTML
        query: Original search term; an 11-digit term must match the page OIB
        source_url: URL the page came from

    Returns:
        The extracted record

    Raises:
        NotACompanyPage: If the page carries no OIB
        IdentifierMismatch: If an OIB search resolved to a different company
    """
    soup = BeautifulSoup(html or "", "html.parser")
    orgs = parse_json_ld(soup)
    text = flatten_text(soup)
    query = (query or "").strip()

    if not OIB_TOKEN_PATTERN.search(text) and "OIB" not in text:
        raise NotACompanyPage(message="No OIB label or 11-digit id on page", url=source_url)

    oib = extract_oib(soup, text, orgs)
    if not oib:
        raise NotACompanyPage(message="No labeled 11-digit OIB on page", url=source_url)
    if is_oib(query) and oib != query:
        raise IdentifierMismatch(expected=query, found=oib)

    name = extract_name(soup, orgs, query)
    mbs = extract_mbs(soup, text, oib)
    phones = extract_phones(soup, text, orgs, exclude=[oib, mbs])
    financial_block = locate_financial_block(text)

    record = CompanyRecord(
        name=name,
        full_name=extract_full_name(soup, orgs, name),
        oib=oib,
        mbs=mbs or SENTINEL,
        address=extract_address(soup, orgs) or SENTINEL,
        founded=extract_founded(soup, text, orgs) or SENTINEL,
        status=extract_status(soup, text) or SENTINEL,
        activity=first_candidate([_labeled(soup, "Djelatnost", "NKD")]) or SENTINEL,
        size=extract_size(soup, text) or SENTINEL,
        rating=extract_rating(soup, text) or SENTINEL,
        blocked=detect_blocked(text),
        phone=phones[0] if phones else SENTINEL,
        phones=phones,
        email=extract_email(soup, text, orgs) or SENTINEL,
        website=extract_website(soup, orgs) or SENTINEL,
        owner=first_candidate([_labeled(soup, *OWNER_LABELS)]) or SENTINEL,
        directors=extract_directors(soup),
        financials=extract_financials(financial_block),
        description=extract_description(soup, orgs),
        bank_accounts=extract_bank_accounts(text),
        real_estate=find_labeled_value(soup, "Nekretnine") or SENTINEL,
        tax_debt=first_candidate([_labeled(soup, *TAX_DEBT_LABELS)]) or SENTINEL,
        average_salary=extract_average_salary(financial_block),
        source_url=source_url,
    )
    logger.info(f"[PARSING] Extracted {record.name} (OIB {record.oib}) from {source_url or 'html'}")
    return record


def extract_company(html: str, query: str = "", source_url: Optional[str] = None) -> Optional[CompanyRecord]:
    """parse_company() that returns None instead of raising for rejected pages."""
    try:
        return parse_company(html, query, source_url)
    except (NotACompanyPage, IdentifierMismatch) as e:
        logger.info(f"[PARSING] Rejected page {source_url or ''}: {e.message}")
        return None
