# client.py
# -*- coding: utf-8 -*-

import dataclasses
import logging
import re
import threading

from typing import List, Optional, Protocol

from companywall.config import KNOWN_COMPANIES_ENABLED
from companywall.exceptions import (
    AllProxiesExhausted,
    NoSearchResult,
    NotACompanyPage,
    IdentifierMismatch,
    ValidationError,
)
from companywall.extractor import parse_company
from companywall.known import match_known_company
from companywall.models import CompanyRecord
from companywall.proxy import ProxyFetcher
from companywall.search import resolve_detail_url
from companywall.store import DocumentStore, ResultCache
from companywall.utils import sanitize_query, digits_only, is_oib

logger = logging.getLogger(__name__)

DESCRIPTION_SYSTEM_PROMPT = (
    "Ti si asistent za poslovne informacije. Odgovaraj kratko, na hrvatskom, "
    "bez izmišljanja podataka koje nisi siguran."
)


class TextCompleter(Protocol):
    def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        ...


def normalize_query(term: str) -> str:
    """Sanitised query; an OIB typed with spaces or dashes collapses to its 11 digits."""
    query = sanitize_query(term)
    if query and re.fullmatch(r"[\d\s.-]+", query) and len(digits_only(query)) == 11:
        return digits_only(query)
    return query


class CompanyWallClient:
    """
    Company lookup on companywall.hr.

    search() runs the whole pipeline: search page -> detail URL -> detail page
    -> CompanyRecord -> cache. It returns a complete record or None, never a
    half-filled one.
    """

    def __init__(
        self,
        fetcher: ProxyFetcher = None,
        store: DocumentStore = None,
        relays: List[str] = None,
        session=None,
        timeout: int = None,
        use_known_companies: bool = None,
        completer: TextCompleter = None,
        background_cache: bool = True
    ):
        """
        Args:
            fetcher: Relay chain; built from relays/session/timeout when omitted
            store: Document store for the result cache (no caching when None)
            use_known_companies: Serve built-in reference records first
            completer: Optional text-completion service used to fill in a missing description
            background_cache: Write to the cache on a separate thread
        """
        self.fetcher = fetcher or ProxyFetcher(relays=relays, session=session, timeout=timeout)
        self.cache = ResultCache(store) if store is not None else None
        self.use_known_companies = (
            use_known_companies if use_known_companies is not None else KNOWN_COMPANIES_ENABLED
        )
        self.completer = completer
        self.background_cache = background_cache
        self._pending_writes: List[threading.Thread] = []
        self._lock = threading.Lock()

    def search(self, term: str) -> Optional[CompanyRecord]:
        """
        Look up one company by name or OIB.

        Args:
            term: Company name or 11-digit OIB

        Returns:
            CompanyRecord, or None if the company could not be found or verified

        Raises:
            ValidationError: If term is empty
        """
        query = normalize_query(term)
        if not query:
            raise ValidationError("Empty query", field="term")

        if self.use_known_companies:
            known = match_known_company(query)
            if known:
                logger.info(f"Found '{query}' in built-in reference records")
                return known

        if self.cache and is_oib(query):
            cached = self.cache.get(query)
            if cached:
                logger.info(f"[CACHE] Serving {query} from store")
                return cached

        try:
            record = self._lookup(query)
        except AllProxiesExhausted as e:
            logger.error(f"[PROXY] {e.message}")
            return None
        except NoSearchResult as e:
            logger.info(f"{e.message}: '{query}'")
            return None
        except (NotACompanyPage, IdentifierMismatch) as e:
            logger.info(f"[PARSING] Rejected result for '{query}': {e.message}")
            return None

        record = self._with_description(record)
        self._cache_record(record)
        return record

    def _lookup(self, query: str) -> CompanyRecord:
        detail_url = resolve_detail_url(self.fetcher, query)
        if not detail_url:
            raise NoSearchResult(query=query)
        html = self.fetcher.fetch_via_proxy(detail_url)
        return parse_company(html, query, source_url=detail_url)

    def _with_description(self, record: CompanyRecord) -> CompanyRecord:
        if record.description or self.completer is None:
            return record
        prompt = (
            f"Napiši opis tvrtke u dvije rečenice. Naziv: {record.full_name}. "
            f"OIB: {record.oib}. Djelatnost: {record.activity}. Sjedište: {record.address}."
        )
        try:
            description = (self.completer.complete(prompt, system_prompt=DESCRIPTION_SYSTEM_PROMPT) or "").strip()
        except Exception as e:
            logger.warning(f"Description lookup failed for {record.oib}: {e}")
            return record
        if not description:
            return record
        return dataclasses.replace(record, description=description)

    def _cache_record(self, record: CompanyRecord) -> None:
        if self.cache is None:
            return
        if not self.background_cache:
            self.cache.cache_if_absent(record)
            return
        thread = threading.Thread(
            target=self.cache.cache_if_absent,
            args=(record,),
            name=f"cache-{record.oib}"
        )
        with self._lock:
            self._pending_writes = [t for t in self._pending_writes if t.is_alive()]
            self._pending_writes.append(thread)
        thread.start()

    def flush(self, timeout: float = None) -> None:
        """Wait for background cache writes to finish."""
        with self._lock:
            pending = list(self._pending_writes)
            self._pending_writes = []
        for thread in pending:
            thread.join(timeout)
