from __future__ import annotations

import json
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from assetshare.core.errors import DependencyError


logger = logging.getLogger(__name__)


class ObjectNotFoundError(LookupError):
    def __init__(self, key: str) -> None:
        super().__init__(f"no object stored under {key!r}")
        self.key = key


@dataclass(slots=True)
class StoredObject:
    """Bytes and metadata kept for one entity image."""

    content: bytes
    content_type: str
    filename: str


class ObjectStore(Protocol):
    def fetch(self, key: str) -> StoredObject: ...

    def store(self, key: str, content: bytes, *, content_type: str | None = None, filename: str | None = None) -> None: ...


class LocalObjectStore:
    """Object store backed by a directory; one data file plus a metadata file per key."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def _paths(self, key: str) -> tuple[Path, Path]:
        normalized = str(key).strip()
        if not normalized or "/" in normalized or "\\" in normalized or normalized.startswith("."):
            raise ValueError(f"invalid object key: {key!r}")
        return self._root / normalized, self._root / f"{normalized}.meta.json"

    def fetch(self, key: str) -> StoredObject:
        data_path, meta_path = self._paths(key)
        if not data_path.is_file():
            raise ObjectNotFoundError(key)
        try:
            content = data_path.read_bytes()
            meta = json.loads(meta_path.read_text(encoding="utf-8")) if meta_path.is_file() else {}
        except (OSError, ValueError) as exc:
            raise DependencyError(f"unable to read object {key!r}") from exc
        filename = meta.get("filename") or str(key)
        content_type = meta.get("content_type") or mimetypes.guess_type(filename)[0] or "application/octet-stream"
        return StoredObject(content=content, content_type=content_type, filename=filename)

    def store(self, key: str, content: bytes, *, content_type: str | None = None, filename: str | None = None) -> None:
        data_path, meta_path = self._paths(key)
        meta = {
            "content_type": content_type or "application/octet-stream",
            "filename": filename or str(key),
        }
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            data_path.write_bytes(content)
            meta_path.write_text(json.dumps(meta), encoding="utf-8")
        except OSError as exc:
            raise DependencyError(f"unable to store object {key!r}") from exc
        logger.info("stored object %s (%d bytes)", key, len(content))
