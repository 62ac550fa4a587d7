"""Domain Store: asynchronous key/value documents addressed by type + id.

The compiler reads one ``{"type": "domain", "id": ...}`` document per
compile request.  Stores never cache: every read returns a fresh copy.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Protocol

from domainapi.domain.errors import CorruptDocument
from domainapi.domain.model import DocumentKey

logger = logging.getLogger(__name__)


def decode_document(key: DocumentKey, raw: str) -> dict[str, Any]:
    """Decode a stored body; anything but a JSON object is corrupt."""
    try:
        data = json.loads(raw)
    except ValueError as exc:
        logger.error("Stored document %s/%s is not valid JSON", key.type, key.id)
        raise CorruptDocument("Stored document is not valid JSON", type=key.type, id=key.id) from exc
    if not isinstance(data, dict):
        logger.error("Stored document %s/%s is not a JSON object", key.type, key.id)
        raise CorruptDocument("Stored document is not a JSON object", type=key.type, id=key.id)
    return data


class DomainStore(Protocol):
    async def read(self, key: DocumentKey) -> dict[str, Any] | None: ...

    async def write(self, key: DocumentKey, document: dict[str, Any]) -> None: ...


class InMemoryDomainStore:
    """Dict-backed store for tests and embedding."""

    def __init__(self, documents: dict[tuple[str, str], dict[str, Any]] | None = None) -> None:
        self._documents: dict[tuple[str, str], dict[str, Any]] = dict(documents or {})

    async def read(self, key: DocumentKey) -> dict[str, Any] | None:
        document = self._documents.get((key.type, key.id))
        return copy.deepcopy(document) if document is not None else None

    async def write(self, key: DocumentKey, document: dict[str, Any]) -> None:
        self._documents[(key.type, key.id)] = copy.deepcopy(document)


class JsonFileDomainStore:
    """One ``<root>/<type>/<id>.json`` file per document."""

    def __init__(self, root: Path) -> None:
        self._root = root

    def path_for(self, key: DocumentKey) -> Path:
        # Path separators in ids would escape the store directory.
        safe_id = key.id.replace("/", "_").replace("\\", "_")
        return self._root / key.type / f"{safe_id}.json"

    async def read(self, key: DocumentKey) -> dict[str, Any] | None:
        path = self.path_for(key)
        if not path.is_file():
            logger.debug("No document at %s", path)
            return None
        return decode_document(key, path.read_text(encoding="utf-8"))

    async def write(self, key: DocumentKey, document: dict[str, Any]) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document, indent=2, sort_keys=True) + "\n", encoding="utf-8")
