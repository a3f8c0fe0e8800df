"""Abstract per-item mutual exclusion.

The store offers single-record atomic writes only, so every
check-then-act sequence against one item (read reservations, decide,
write reservation, re-sync counters) runs inside ``hold(inventory_id)``.
Implementations raise ``ResourceBusyError`` when the section cannot be
entered in time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager


class ItemLockProvider(ABC):

    @abstractmethod
    def hold(self, inventory_id: str) -> AbstractContextManager[None]:
        """Return a context manager that owns the item for its duration."""
