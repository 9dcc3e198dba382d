# companywall package
# -*- coding: utf-8 -*-

"""
Companywall - Croatian company lookup on companywall.hr through public proxy relays
"""

__version__ = "1.0.0"

from companywall.models import CompanyRecord, FinancialYear, BankAccount, AverageSalary
from companywall.client import CompanyWallClient
from companywall.proxy import ProxyFetcher
from companywall.store import DocumentStore, MemoryDocumentStore, FileDocumentStore, ResultCache
from companywall.exceptions import (
    CompanyWallError,
    RelayFailure,
    AllProxiesExhausted,
    NoSearchResult,
    NotACompanyPage,
    IdentifierMismatch,
    CacheWriteFailure,
    ValidationError,
    FileError
)

__all__ = [
    "CompanyRecord",
    "FinancialYear",
    "BankAccount",
    "AverageSalary",
    "CompanyWallClient",
    "ProxyFetcher",
    "DocumentStore",
    "MemoryDocumentStore",
    "FileDocumentStore",
    "ResultCache",
    "CompanyWallError",
    "RelayFailure",
    "AllProxiesExhausted",
    "NoSearchResult",
    "NotACompanyPage",
    "IdentifierMismatch",
    "CacheWriteFailure",
    "ValidationError",
    "FileError",
    "__version__"
]
