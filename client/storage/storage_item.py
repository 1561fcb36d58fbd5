"""
HexJSON Reference: N/A (per-session state, e.g. the last selected dataset).
Purpose: Wrapper managing one key of session storage, stored as JSON.
Dependencies: core/errors.py, json.
Ext Hooks: Persist to disk between sessions.
"""

import json
from typing import Any, Dict, Optional

from core.errors import UninitializedStorageError


class SessionStorage:
    """In-process key/value store of JSON strings, lives as long as the session."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def set_item(self, key: str, value: str):
        self._items[key] = value

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def remove_item(self, key: str):
        self._items.pop(key, None)


session_storage = SessionStorage()


class StorageItem:
    def __init__(self, key: str, storage: Optional[SessionStorage] = None):
        if not key:
            raise ValueError("No key provided to StorageItem")
        self.key = key
        self.storage = storage if storage is not None else session_storage

    def set(self, data: Any):
        self.storage.set_item(self.key, json.dumps(data))

    def get(self) -> Any:
        data = self.storage.get_item(self.key)
        if data is None:
            raise UninitializedStorageError(f"{self.key!r} not set")
        return json.loads(data)

    def clear(self):
        self.storage.remove_item(self.key)
