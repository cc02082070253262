"""Observable wishlist of liked product references.

A :class:`WishlistStore` is built once per owner (one per user session in the
web app) and handed to whoever needs it.  It keeps an ordered, duplicate-free
list of references in memory and mirrors every change to a key-value storage
as a JSON array of strings.
"""

from __future__ import annotations

import json
import logging
from typing import Callable, Dict, List, Optional

from flask.sessions import SessionMixin

logger = logging.getLogger(__name__)

STORAGE_KEY = "athenas-wishlist"

# Leaves room for the other session keys and the signature inside the ~4 KB cookie.
MAX_SESSION_VALUE_BYTES = 3000

Listener = Callable[[], None]


class StorageUnavailable(Exception):
    """Raised by a storage backend that cannot be read or written."""


class MemoryStorage:
    """Dict-backed storage, for tests and contexts without a browser session."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class SessionStorage:
    """Storage over a Flask session (or any mutable mapping).

    A Flask session is made permanent on the first write so the cookie outlives
    the browser window.  The cookie itself is capped at roughly 4 KB; values
    longer than ``max_bytes`` are refused with :class:`StorageUnavailable`.
    """

    def __init__(self, session, max_bytes: int = MAX_SESSION_VALUE_BYTES):
        self.session = session
        self.max_bytes = max_bytes

    def get_item(self, key: str) -> Optional[str]:
        value = self.session.get(key)
        return value if value is None or isinstance(value, str) else json.dumps(value)

    def set_item(self, key: str, value: str) -> None:
        size = len(value.encode("utf-8"))
        if size > self.max_bytes:
            raise StorageUnavailable(f"{size} bytes exceed the session cookie quota")
        if isinstance(self.session, SessionMixin):
            self.session.permanent = True
        self.session[key] = value

    def remove_item(self, key: str) -> None:
        self.session.pop(key, None)


def _is_reference_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


class WishlistStore:
    """Ordered set of product references with subscribe/notify semantics."""

    def __init__(self, storage=None, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._items: Optional[List[str]] = None
        self._listeners: List[Listener] = []

    # -- storage ----------------------------------------------------------

    def _load(self) -> List[str]:
        if self.storage is None:
            return []
        try:
            raw = self.storage.get_item(self.key)
        except StorageUnavailable:
            logger.info("Wishlist storage unavailable, keeping the list in memory only.")
            self.storage = None
            return []
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Corrupted wishlist data in storage, cleared.")
            self._discard()
            return []
        if not _is_reference_list(parsed):
            logger.warning("Invalid wishlist data in storage, cleared.")
            self._discard()
            return []
        # Older writers did not always de-duplicate.
        return list(dict.fromkeys(parsed))

    def _discard(self) -> None:
        try:
            self.storage.remove_item(self.key)
        except StorageUnavailable:
            self.storage = None

    def _save(self, items: List[str]) -> None:
        if self.storage is None:
            return
        try:
            self.storage.set_item(self.key, json.dumps(items))
        except StorageUnavailable:
            logger.warning("Failed to save wishlist, keeping the list in memory only.")
            self.storage = None

    def _commit(self, items: List[str]) -> None:
        self._items = items
        self._save(items)
        for listener in list(self._listeners):
            listener()

    # -- public API -------------------------------------------------------

    def get(self) -> List[str]:
        if self._items is None:
            self._items = self._load()
        return list(self._items)

    @property
    def count(self) -> int:
        return len(self.get())

    def contains(self, ref: str) -> bool:
        return ref in self.get()

    def add(self, ref: str) -> None:
        current = self.get()
        if ref in current:
            return
        self._commit(current + [ref])

    def remove(self, ref: str) -> None:
        current = self.get()
        if ref not in current:
            return
        self._commit([item for item in current if item != ref])

    def toggle(self, ref: str) -> bool:
        """Flip membership of *ref*; return True when it is now in the list."""
        if self.contains(ref):
            self.remove(ref)
            return False
        self.add(ref)
        return True

    def clear(self) -> None:
        self._commit([])

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
