from __future__ import annotations

import threading
from contextlib import contextmanager, nullcontext
from typing import Any, Generator

from loguru import logger

from frontdesk.models.appointment import WAITING, Appointment
from frontdesk.services.store import TableStore

SERIALIZED = "serialized"
COMPAT = "compat"

# Shared by every allocator in the process so two requests cannot read the same maximum
_ALLOCATION_LOCK = threading.Lock()


class QueueAllocator:
    """Hands out OPD queue numbers.

    The next number is one past the highest number still *waiting*, so numbers are
    recycled: once the top waiting appointment moves on, its number is handed out
    again. In ``serialized`` mode the read of the current maximum and the insert that
    claims the next number happen under one process-wide lock. ``compat`` mode skips
    the lock and can hand the same number to two concurrent bookings.
    """

    def __init__(self, store: TableStore[Appointment], *, mode: str = SERIALIZED) -> None:
        if mode not in {SERIALIZED, COMPAT}:
            raise ValueError(f"Unsupported queue allocation mode: {mode}")
        self.store = store
        self.mode = mode

    def next_queue_number(self) -> int:
        top = self.store.query(
            Appointment.status == WAITING,
            order_by=[Appointment.queue_number.desc()],
            limit=1,
        )
        return top[0].queue_number + 1 if top else 1

    @contextmanager
    def _allocation(self) -> Generator[None, None, None]:
        guard = _ALLOCATION_LOCK if self.mode == SERIALIZED else nullcontext()
        with guard:
            yield

    def allocate(self, **values: Any) -> Appointment:
        """Insert a waiting appointment carrying the next queue number."""
        with self._allocation():
            queue_number = self.next_queue_number()
            logger.debug("Allocating queue number {number} ({mode})", number=queue_number, mode=self.mode)
            return self.store.insert(queue_number=queue_number, status=WAITING, **values)
