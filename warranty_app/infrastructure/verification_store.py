"""Key/value storage for outstanding phone verification codes."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

from warranty_app.domain.entities import VerificationCodeEntry


class LockedEntry(Protocol):
    """Access to a single key while its lock is held."""

    def get(self) -> VerificationCodeEntry | None: ...

    def put(self, entry: VerificationCodeEntry) -> None: ...

    def remove(self) -> None: ...


class VerificationCodeStore(Protocol):
    """Storage contract with atomic per-key read-modify-write."""

    def put(self, key: str, entry: VerificationCodeEntry) -> None: ...

    def remove(self, key: str) -> None: ...

    def locked(self, key: str) -> AbstractContextManager[LockedEntry]: ...


class _InMemoryLockedEntry:
    def __init__(self, store: "InMemoryVerificationCodeStore", key: str) -> None:
        self._store = store
        self._key = key

    def get(self) -> VerificationCodeEntry | None:
        return self._store._entries.get(self._key)

    def put(self, entry: VerificationCodeEntry) -> None:
        self._store._entries[self._key] = entry

    def remove(self) -> None:
        self._store._entries.pop(self._key, None)


LOCK_STRIPES = 64


class InMemoryVerificationCodeStore:
    """
    Dictionary-backed store guarded by a fixed pool of striped locks.

    A key always maps to the same lock, so concurrent attempts against one
    user are serialized. The pool size does not grow with the number of users.
    Locks are not reentrant: never hold two keys at once.
    """

    def __init__(self, stripes: int = LOCK_STRIPES) -> None:
        if stripes <= 0:
            raise ValueError("stripes must be positive")
        self._entries: dict[str, VerificationCodeEntry] = {}
        self._locks = tuple(threading.Lock() for _ in range(stripes))

    def _lock_for(self, key: str) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]

    @contextmanager
    def locked(self, key: str) -> Iterator[_InMemoryLockedEntry]:
        with self._lock_for(key):
            yield _InMemoryLockedEntry(self, key)

    def put(self, key: str, entry: VerificationCodeEntry) -> None:
        with self.locked(key) as handle:
            handle.put(entry)

    def get(self, key: str) -> VerificationCodeEntry | None:
        with self.locked(key) as handle:
            return handle.get()

    def remove(self, key: str) -> None:
        with self.locked(key) as handle:
            handle.remove()

    def __len__(self) -> int:
        return len(self._entries)


verification_code_store = InMemoryVerificationCodeStore()


__all__ = [
    "InMemoryVerificationCodeStore",
    "LOCK_STRIPES",
    "LockedEntry",
    "VerificationCodeStore",
    "verification_code_store",
]
