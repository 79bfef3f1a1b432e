# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Durable key-value storage.

String keys map to string values (JSON documents in practice). The stores in
``pricegate.auth`` only talk to a ``KeyValueStorage``, so tests can hand them
a ``MemoryStorage`` while the app uses a ``FileStorage`` under the data dir.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStorage:
    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage(KeyValueStorage):
    """All keys live in one JSON object file.

    A missing, unreadable or corrupt file reads as empty. Every write
    rewrites the whole file through a temp file + ``os.replace``.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.debug("storage file %s unreadable: %s", self.path, exc)
            return {}
        parsed = parse_json(raw)
        if parsed.error or not isinstance(parsed.value, dict):
            logger.debug("storage file %s is not a JSON object, treating as empty", self.path)
            return {}
        return {str(k): v for k, v in parsed.value.items() if isinstance(v, str)}

    def _write_all(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".storage_", suffix=".json", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = str(value)
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)


@dataclass(frozen=True)
class ParseResult:
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_json(raw: Optional[str]) -> ParseResult:
    if raw is None:
        return ParseResult(value=None)
    try:
        return ParseResult(value=json.loads(raw))
    except (TypeError, ValueError) as exc:
        return ParseResult(error=str(exc))


def load_json(storage: KeyValueStorage, key: str, default: Any = None) -> Any:
    """Read and decode ``key``; absent or malformed values collapse to ``default``."""
    result = parse_json(storage.get_item(key))
    if not result.ok:
        logger.debug("malformed JSON under %r, using default: %s", key, result.error)
        return default
    if result.value is None:
        return default
    return result.value


def save_json(storage: KeyValueStorage, key: str, value: Any) -> None:
    storage.set_item(key, json.dumps(value, ensure_ascii=False))
