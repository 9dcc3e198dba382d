# exceptions.py
# -*- coding: utf-8 -*-

"""
Custom exceptions for the companywall lookup pipeline
"""


class CompanyWallError(Exception):
    """Base exception for every companywall error"""
    pass


class RelayFailure(CompanyWallError):
    """A single proxy relay returned a bad status, a transport error or a too-short body"""

    def __init__(
        self,
        message: str = None,
        url: str = None,
        attempt: int = None,
        status_code: int = None,
        original_error: Exception = None
    ):
        self.message = message or "Relay failed"
        self.url = url
        self.attempt = attempt
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(self.message)


class AllProxiesExhausted(CompanyWallError):
    """Every configured relay failed for one fetch"""

    def __init__(self, message: str = None, url: str = None, attempts: int = None, last_error: Exception = None):
        self.message = message or "All proxy relays are unavailable"
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(self.message)


class NoSearchResult(CompanyWallError):
    """The search results page had no usable detail-page anchor"""

    def __init__(self, message: str = None, query: str = None):
        self.message = message or "No company found in search results"
        self.query = query
        super().__init__(self.message)


class NotACompanyPage(CompanyWallError):
    """The detail page carries no OIB and is not a company page"""

    def __init__(self, message: str = None, url: str = None):
        self.message = message or "Page is not a company detail page"
        self.url = url
        super().__init__(self.message)


class IdentifierMismatch(CompanyWallError):
    """The OIB on the page differs from the OIB that was searched for"""

    def __init__(self, message: str = None, expected: str = None, found: str = None):
        self.message = message or f"OIB mismatch: expected {expected}, found {found}"
        self.expected = expected
        self.found = found
        super().__init__(self.message)


class CacheWriteFailure(CompanyWallError):
    """Persisting a record to the document store failed"""

    def __init__(self, message: str = None, oib: str = None, original_error: Exception = None):
        self.message = message or "Failed to write record to the document store"
        self.oib = oib
        self.original_error = original_error
        super().__init__(self.message)


class ValidationError(CompanyWallError):
    """Invalid input"""

    def __init__(self, message: str = None, field: str = None):
        self.message = message or "Invalid input"
        self.field = field
        super().__init__(self.message)


class FileError(CompanyWallError):
    """File operation failed"""

    def __init__(self, message: str = None, file_path: str = None):
        self.message = message or "File operation failed"
        self.file_path = file_path
        super().__init__(self.message)
