# proxy.py
# -*- coding: utf-8 -*-

import logging
import random

from typing import List, Optional
from urllib.parse import quote

try:
    from curl_cffi import requests as cffi_requests
    CURL_CFFI_AVAILABLE = True
    try:
        from curl_cffi.requests.exceptions import RequestException as CffiRequestException
    except (ImportError, AttributeError):
        CffiRequestException = None
except ImportError:
    cffi_requests = None
    CURL_CFFI_AVAILABLE = False
    CffiRequestException = None

import requests
RequestException = requests.RequestException

if CffiRequestException:
    RequestExceptionTypes = (RequestException, CffiRequestException)
else:
    RequestExceptionTypes = (RequestException,)

from companywall.config import PROXY_RELAYS, REQUEST_TIMEOUT, MIN_BODY_LENGTH
from companywall.exceptions import RelayFailure, AllProxiesExhausted

logger = logging.getLogger(__name__)

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:123.0) Gecko/20100101 Firefox/123.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:123.0) Gecko/20100101 Firefox/123.0",
]

DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "hr-HR,hr;q=0.9,en-US;q=0.8,en;q=0.7",
    "Accept-Encoding": "gzip, deflate",
}


def build_session(impersonate: bool = True):
    """
    HTTP session for talking to the relays.

    Uses curl_cffi with Chrome impersonation when it is installed, plain
    requests otherwise.
    """
    if impersonate and CURL_CFFI_AVAILABLE:
        session = cffi_requests.Session(impersonate="chrome120")
        logger.info("Using curl_cffi with Chrome 120 impersonation")
    else:
        session = requests.Session()
        session.headers.update({"User-Agent": random.choice(USER_AGENTS)})
        logger.info("Using standard requests session (install curl_cffi for browser impersonation)")
    session.headers.update(DEFAULT_HEADERS)
    return session


def build_relay_url(relay: str, target_url: str) -> str:
    return relay.format(url=quote(target_url, safe=""))


class ProxyFetcher:
    """
    Fetch a page through an ordered chain of public CORS relays.

    Every relay is tried once per call, in order, with no delay in between.
    """

    def __init__(
        self,
        relays: Optional[List[str]] = None,
        session=None,
        timeout: int = None,
        min_body_length: int = None
    ):
        self.relays = list(relays) if relays is not None else list(PROXY_RELAYS)
        self.session = session if session is not None else build_session()
        self.timeout = timeout or REQUEST_TIMEOUT
        self.min_body_length = min_body_length if min_body_length is not None else MIN_BODY_LENGTH

    def fetch_via_proxy(self, url: str, attempt: int = 0) -> str:
        """
        Return the body of url, fetched through relay number `attempt` or a later one.

        Args:
            url: Target page
            attempt: Index of the first relay to try

        Returns:
            Raw response text

        Raises:
            AllProxiesExhausted: If every remaining relay failed
        """
        last_error: Optional[RelayFailure] = None

        while attempt < len(self.relays):
            try:
                return self._fetch_once(url, attempt)
            except RelayFailure as e:
                logger.warning(f"[PROXY] Relay {attempt + 1}/{len(self.relays)} failed for {url}: {e.message}")
                last_error = e
                attempt += 1

        raise AllProxiesExhausted(
            message=f"All {len(self.relays)} relays failed for {url}",
            url=url,
            attempts=len(self.relays),
            last_error=last_error
        )

    def _fetch_once(self, url: str, attempt: int) -> str:
        relay_url = build_relay_url(self.relays[attempt], url)
        logger.debug(f"[PROXY] GET {relay_url}")

        try:
            resp = self.session.get(relay_url, timeout=self.timeout)
        except RequestExceptionTypes as e:
            raise RelayFailure(
                message=f"Connection error: {e}",
                url=relay_url,
                attempt=attempt,
                original_error=e
            )

        if not 200 <= resp.status_code < 300:
            raise RelayFailure(
                message=f"HTTP {resp.status_code}",
                url=relay_url,
                attempt=attempt,
                status_code=resp.status_code
            )

        body = resp.text or ""
        if len(body) < self.min_body_length:
            raise RelayFailure(
                message=f"Body too short ({len(body)} chars)",
                url=relay_url,
                attempt=attempt,
                status_code=resp.status_code
            )

        logger.info(f"[PROXY] Relay {attempt + 1} returned {len(body)} chars for {url}")
        return body
