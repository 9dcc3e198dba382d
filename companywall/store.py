# store.py
# -*- coding: utf-8 -*-

"""
Document store interface and the write-once result cache built on it.

The store is passed in explicitly; the pipeline never touches global state.
MemoryDocumentStore is used in tests and short-lived processes,
FileDocumentStore keeps one JSON file per document on disk.
"""

import json
import logging
import threading
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from companywall.config import COMPANIES_COLLECTION, STORE_DIR
from companywall.exceptions import CacheWriteFailure
from companywall.models import CompanyRecord

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class DocumentStore(Protocol):
    def find(self, collection: str, filters: Dict[str, Any]) -> List[Document]:
        ...

    def create(self, collection: str, document: Document) -> Document:
        ...


def _matches(document: Document, filters: Dict[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in filters.items())


class MemoryDocumentStore:
    """In-process store (thread-safe)"""

    def __init__(self):
        self._collections: Dict[str, List[Document]] = {}
        self._lock = threading.Lock()

    def find(self, collection: str, filters: Dict[str, Any]) -> List[Document]:
        with self._lock:
            return [dict(doc) for doc in self._collections.get(collection, []) if _matches(doc, filters)]

    def create(self, collection: str, document: Document) -> Document:
        stored = dict(document)
        stored.setdefault("_id", uuid.uuid4().hex)
        with self._lock:
            self._collections.setdefault(collection, []).append(stored)
        return dict(stored)

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections.get(collection, []))


class FileDocumentStore:
    """
    File-based store: <store_dir>/<collection>/<id>.json.
    find() scans the whole collection directory.
    """

    def __init__(self, store_dir: str = None):
        """
        Args:
            store_dir: Root directory of the store
        """
        self.store_dir = Path(store_dir or STORE_DIR)
        self.store_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _collection_dir(self, collection: str) -> Path:
        path = self.store_dir / collection
        path.mkdir(exist_ok=True)
        return path

    def find(self, collection: str, filters: Dict[str, Any]) -> List[Document]:
        results: List[Document] = []
        with self._lock:
            for doc_file in sorted(self._collection_dir(collection).glob("*.json")):
                try:
                    with open(doc_file, 'r', encoding='utf-8') as f:
                        document = json.load(f)
                except (OSError, json.JSONDecodeError) as e:
                    logger.warning(f"[STORE] Skipping unreadable document {doc_file.name}: {e}")
                    continue
                if _matches(document, filters):
                    results.append(document)
        return results

    def create(self, collection: str, document: Document) -> Document:
        stored = dict(document)
        stored.setdefault("_id", uuid.uuid4().hex)
        stored["_created_at"] = time.time()
        doc_path = self._collection_dir(collection) / f"{stored['_id']}.json"
        with self._lock:
            with open(doc_path, 'w', encoding='utf-8') as f:
                json.dump(stored, f, ensure_ascii=False, indent=2)
        logger.debug(f"[STORE] Created {collection}/{stored['_id']}")
        return stored

    def clear(self, collection: str) -> int:
        deleted = 0
        with self._lock:
            for doc_file in self._collection_dir(collection).glob("*.json"):
                try:
                    doc_file.unlink()
                    deleted += 1
                except OSError as e:
                    logger.warning(f"[STORE] Cannot delete {doc_file.name}: {e}")
        logger.info(f"[STORE] Cleared {deleted} documents from {collection}")
        return deleted


class ResultCache:
    """
    Write-once cache of extracted records, keyed by OIB.

    The existence check and the insert are two separate store calls, so two
    processes racing on the same OIB can both insert unless the store itself
    enforces a unique key.
    """

    def __init__(self, store: DocumentStore, collection: str = None):
        self.store = store
        self.collection = collection or COMPANIES_COLLECTION

    def get(self, oib: str) -> Optional[CompanyRecord]:
        """Stored record for oib, or None (read failures are logged)."""
        try:
            documents = self.store.find(self.collection, {"oib": oib})
        except Exception as e:
            logger.warning(f"[CACHE] Read failed for {oib}: {e}")
            return None
        if not documents:
            return None
        logger.debug(f"[CACHE] Hit for {oib}")
        return CompanyRecord.from_dict(documents[0])

    def cache_if_absent(self, record: CompanyRecord) -> bool:
        """
        Insert record unless a document with the same OIB exists.

        Never raises; a store failure is logged and reported as False.

        Returns:
            True if a new document was written
        """
        try:
            existing = self.store.find(self.collection, {"oib": record.oib})
            if existing:
                logger.debug(f"[CACHE] {record.oib} already cached, skipping")
                return False
            self.store.create(self.collection, record.to_dict())
            logger.info(f"[CACHE] Cached {record.name} ({record.oib})")
            return True
        except Exception as e:
            failure = CacheWriteFailure(oib=record.oib, original_error=e)
            logger.warning(f"[CACHE] {failure.message} ({record.oib}): {e}")
            return False
