"""
Document store used to persist interviews and owners.

Documents are plain JSON-compatible dicts keyed by ``id``. The store keeps a
``version`` counter on every document; ``update`` accepts an expected version
and refuses to write when another writer got there first.
"""
import copy
import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ..errors import ConcurrentModificationError
from ..utils.logger import setup_logger

logger = setup_logger("document_store")


class DocumentStore(ABC):
    """Minimal find/create/update interface over named collections."""

    def __init__(self):
        self._lock = threading.RLock()

    @abstractmethod
    def _read(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def _write(self, collection: str, document: Dict[str, Any]):
        ...

    @abstractmethod
    def _read_all(self, collection: str) -> List[Dict[str, Any]]:
        ...

    def find_by_id(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Get a document by id, or None."""
        with self._lock:
            return self._read(collection, doc_id)

    def find(self, collection: str, **criteria) -> List[Dict[str, Any]]:
        """Get every document whose fields equal the given criteria."""
        with self._lock:
            return [
                doc for doc in self._read_all(collection)
                if all(doc.get(key) == value for key, value in criteria.items())
            ]

    def create(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new document. Its ``version`` starts at 0."""
        if "id" not in document:
            raise ValueError("Documents must have an 'id' field")
        with self._lock:
            if self._read(collection, document["id"]) is not None:
                raise ValueError(f"Document {collection}/{document['id']} already exists")
            stored = copy.deepcopy(document)
            stored["version"] = 0
            self._write(collection, stored)
            return copy.deepcopy(stored)

    def update(
        self,
        collection: str,
        doc_id: str,
        changes: Dict[str, Any],
        expected_version: Optional[int] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Apply field changes to a document.

        Args:
            collection: Collection name
            doc_id: Document id
            changes: Fields to overwrite
            expected_version: If given, the write only happens when the stored
                version still equals it

        Returns:
            Updated document, or None if it does not exist

        Raises:
            ConcurrentModificationError: If the stored version moved on
        """
        with self._lock:
            current = self._read(collection, doc_id)
            if current is None:
                return None
            if expected_version is not None and current.get("version", 0) != expected_version:
                logger.warning(
                    f"Version conflict on {collection}/{doc_id}: "
                    f"expected {expected_version}, found {current.get('version', 0)}"
                )
                raise ConcurrentModificationError()

            current.update(copy.deepcopy(changes))
            current["version"] = current.get("version", 0) + 1
            self._write(collection, current)
            return copy.deepcopy(current)


class InMemoryStore(DocumentStore):
    """Dict-backed store for tests and single-process development."""

    def __init__(self):
        super().__init__()
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def _read(self, collection, doc_id):
        doc = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def _write(self, collection, document):
        self._collections.setdefault(collection, {})[document["id"]] = copy.deepcopy(document)

    def _read_all(self, collection):
        return [copy.deepcopy(doc) for doc in self._collections.get(collection, {}).values()]


class JSONFileStore(DocumentStore):
    """
    Stores each document as a JSON file: ``<storage_dir>/<collection>/<id>.json``.
    """

    def __init__(self, storage_dir: Path):
        super().__init__()
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"JSONFileStore initialized, storage: {self.storage_dir}")

    def _collection_dir(self, collection: str) -> Path:
        path = self.storage_dir / collection
        path.mkdir(exist_ok=True)
        return path

    def _document_file(self, collection: str, doc_id: str) -> Path:
        """File for a document. Ids are opaque keys and are quoted, never used as paths."""
        collection_dir = self._collection_dir(collection)
        doc_file = collection_dir / f"{quote(str(doc_id), safe='')}.json"
        if doc_file.resolve().parent != collection_dir.resolve():
            raise ValueError(f"Invalid document id: {doc_id!r}")
        return doc_file

    def _read(self, collection, doc_id):
        doc_file = self._document_file(collection, doc_id)
        if not doc_file.exists():
            return None
        with open(doc_file, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _write(self, collection, document):
        doc_file = self._document_file(collection, document["id"])
        tmp_file = doc_file.with_suffix(".json.tmp")
        try:
            with open(tmp_file, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            tmp_file.replace(doc_file)
        except Exception as e:
            logger.error(f"Error saving {collection}/{document['id']}: {e}")
            raise

    def _read_all(self, collection):
        documents = []
        for doc_file in sorted(self._collection_dir(collection).glob("*.json")):
            with open(doc_file, 'r', encoding='utf-8') as f:
                documents.append(json.load(f))
        return documents
