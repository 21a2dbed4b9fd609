from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

log = logging.getLogger(__name__)

T = TypeVar("T")

DOCUMENTS_KEY = "documents"
MESSAGES_KEY = "messages"
SETTINGS_KEY = "settings"


class JsonStateStore:
    """Independently keyed JSON snapshots, one file per key under `root`."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def load(self, key: str, adapter: TypeAdapter[T]) -> Optional[T]:
        """Return the parsed snapshot, or None if it is missing or unreadable."""
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            raw = path.read_bytes()
            return adapter.validate_json(raw)
        except (OSError, ValidationError) as e:
            log.warning("Ignoring unreadable %s snapshot at %s: %s", key, path, e)
            return None

    def save(self, key: str, value: Any, adapter: TypeAdapter[Any]) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        tmp = path.with_suffix(".json.tmp")
        data = adapter.dump_json(value, by_alias=True, exclude_none=True, indent=2)
        tmp.write_bytes(data)
        os.replace(tmp, path)
        log.debug("Wrote %s snapshot (%d bytes)", key, len(data))

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        log.debug("Deleted %s snapshot", key)


__all__ = ["DOCUMENTS_KEY", "MESSAGES_KEY", "SETTINGS_KEY", "JsonStateStore"]
