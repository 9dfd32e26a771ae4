"""RevocationRegistry — the table of tracked credentials and their validity.

Maps each credential identifier (jti) to a validity bit: ``True`` while the
credential is valid, ``False`` once revoked. Revocation is monotone; there
is no operation that flips an entry back to valid. A reissued credential
needs a fresh jti.

The registry only mutates state. Callers decide when to republish.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from dynamic_status_list.errors import InputError, NotFoundError
from dynamic_status_list.storage import load_json, save_json

logger = logging.getLogger(__name__)


class RevocationRegistry:
    """Thread-safe jti -> validity map with optional JSON persistence.

    When *persist_path* is set, every mutation is written to disk before it
    becomes visible in memory. If the write fails the mutation is rolled
    back and :class:`~dynamic_status_list.errors.StorageError` propagates.

    Parameters
    ----------
    persist_path:
        If provided, entries are read from and written to this JSON file
        (``{"<jti>": true, ...}``).

    Example
    -------
    ::

        registry = RevocationRegistry()
        registry.track("abc")
        registry.revoke("abc")
        assert registry.snapshot() == {"abc": False}
    """

    def __init__(self, persist_path: Path | None = None) -> None:
        self._entries: dict[str, bool] = {}
        self._lock = threading.Lock()
        self._persist_path = persist_path

        if persist_path is not None and persist_path.exists():
            self._entries = self._load_from_disk(persist_path)
            logger.info(
                "Loaded %d status list entries from %s", len(self._entries), persist_path
            )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def track(self, jti: str) -> bool:
        """Start tracking *jti* as valid.

        Idempotent: an existing entry, valid or revoked, is left untouched.

        Returns
        -------
        bool
            True if a new entry was created.
        """
        with self._lock:
            if jti in self._entries:
                return False
            self._entries[jti] = True
            try:
                self._save_to_disk()
            except Exception:
                del self._entries[jti]
                raise
        logger.info("Tracking new status list entry")
        return True

    def revoke(self, jti: str) -> None:
        """Mark *jti* as revoked.

        Revoking an already revoked entry is a no-op.

        Raises
        ------
        NotFoundError
            If *jti* is not tracked.
        """
        with self._lock:
            if jti not in self._entries:
                raise NotFoundError(jti)
            if not self._entries[jti]:
                return
            self._entries[jti] = False
            try:
                self._save_to_disk()
            except Exception:
                self._entries[jti] = True
                raise
        logger.info("Revoked status list entry")

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def snapshot(self) -> Mapping[str, bool]:
        """Return a read-only copy of every entry."""
        with self._lock:
            return MappingProxyType(dict(self._entries))

    def is_tracked(self, jti: str) -> bool:
        """Return True if *jti* has an entry."""
        with self._lock:
            return jti in self._entries

    def is_valid(self, jti: str) -> bool:
        """Return the validity bit for *jti*.

        Raises
        ------
        NotFoundError
            If *jti* is not tracked.
        """
        with self._lock:
            try:
                return self._entries[jti]
            except KeyError:
                raise NotFoundError(jti) from None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _save_to_disk(self) -> None:
        """Write all entries to the persist path. Caller holds the lock."""
        if self._persist_path is None:
            return
        save_json(dict(sorted(self._entries.items())), self._persist_path)

    @staticmethod
    def _load_from_disk(path: Path) -> dict[str, bool]:
        """Read and validate entries from *path*."""
        payload = load_json(path)
        if not isinstance(payload, dict):
            raise InputError(f"registry file {path} must contain a JSON object")
        entries: dict[str, bool] = {}
        for jti, valid in payload.items():
            if not isinstance(valid, bool):
                raise InputError(
                    f"registry file {path}: value for {jti!r} must be a boolean"
                )
            entries[str(jti)] = valid
        return entries
