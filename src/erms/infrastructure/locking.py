"""File-based implementation of ItemLockProvider.

One lock file per inventory id under a shared directory, so every
process pointed at the same data directory (each CLI invocation is its
own process) serialises on the same item.  Holding is re-entrant within
a thread.
"""

from __future__ import annotations

import logging
import re
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout

from erms.domain.exceptions import ResourceBusyError
from erms.domain.repository.item_lock import ItemLockProvider

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


class FileItemLocks(ItemLockProvider):

    def __init__(self, lock_dir: Path, timeout: float = 10.0) -> None:
        self.lock_dir = lock_dir
        self.timeout = timeout
        self._registry_lock = threading.Lock()
        self._locks: dict[str, FileLock] = {}
        self.lock_dir.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def hold(self, inventory_id: str) -> Iterator[None]:
        lock = self._lock_for(inventory_id)
        try:
            lock.acquire(timeout=self.timeout)
        except Timeout as exc:
            logger.warning(
                "Timed out after %.1fs waiting for lock on %s",
                self.timeout, inventory_id,
            )
            raise ResourceBusyError(inventory_id) from exc
        try:
            yield
        finally:
            lock.release()

    def _lock_for(self, inventory_id: str) -> FileLock:
        with self._registry_lock:
            lock = self._locks.get(inventory_id)
            if lock is None:
                path = self.lock_dir / f"{_UNSAFE.sub('_', inventory_id)}.lock"
                # thread_local: each thread gets its own handle, so threads
                # sharing this provider still exclude one another.
                lock = self._locks[inventory_id] = FileLock(path, thread_local=True)
            return lock
