from __future__ import annotations

import threading
import time
from types import SimpleNamespace

import pytest

from frontdesk.models.appointment import COMPLETED, IN_PROGRESS
from frontdesk.services.queue import COMPAT, SERIALIZED, QueueAllocator


def _book(appointments, name):
    return appointments.book(name=name, age=40)


def test_first_booking_gets_number_one(appointments):
    assert appointments.next_queue_number() == 1
    assert _book(appointments, "Asha").queue_number == 1


def test_numbers_run_one_to_n_while_everyone_waits(appointments):
    numbers = [_book(appointments, f"Patient {i}").queue_number for i in range(6)]
    assert numbers == [1, 2, 3, 4, 5, 6]


@pytest.mark.parametrize("leaving_status", [IN_PROGRESS, COMPLETED])
def test_top_number_is_recycled_once_it_leaves_waiting(appointments, leaving_status):
    _book(appointments, "A")
    _book(appointments, "B")
    third = _book(appointments, "C")
    assert third.queue_number == 3

    appointments.update_status(third.id, leaving_status)

    assert _book(appointments, "D").queue_number == 3


def test_lower_number_leaving_does_not_change_next(appointments):
    first = _book(appointments, "A")
    _book(appointments, "B")
    _book(appointments, "C")

    appointments.update_status(first.id, COMPLETED)

    assert _book(appointments, "D").queue_number == 4


def test_empty_waiting_set_restarts_at_one(appointments):
    for name in ("A", "B"):
        booked = _book(appointments, name)
        appointments.update_status(booked.id, COMPLETED)

    assert appointments.next_queue_number() == 1


def test_unknown_mode_is_rejected():
    with pytest.raises(ValueError):
        QueueAllocator(store=None, mode="optimistic")


class BlockingStore:
    """Stand-in for TableStore that can hold the first insert open."""

    def __init__(self) -> None:
        self.rows: list[SimpleNamespace] = []
        self.reads = 0
        self.insert_started = threading.Event()
        self.release_insert = threading.Event()
        self._first = True

    def query(self, *criteria, order_by=(), limit=None):
        self.reads += 1
        waiting = sorted(
            (row for row in self.rows if row.status == "waiting"),
            key=lambda row: row.queue_number,
            reverse=True,
        )
        return waiting[:limit] if limit else waiting

    def insert(self, **values):
        if self._first:
            self._first = False
            self.insert_started.set()
            self.release_insert.wait(timeout=5)
        row = SimpleNamespace(**values)
        self.rows.append(row)
        return row


def _run(allocator, results):
    results.append(allocator.allocate(patient_name="x").queue_number)


def test_compat_mode_reproduces_duplicate_numbers():
    store = BlockingStore()
    allocator = QueueAllocator(store, mode=COMPAT)
    results: list[int] = []

    first = threading.Thread(target=_run, args=(allocator, results))
    first.start()
    assert store.insert_started.wait(timeout=5)

    second = threading.Thread(target=_run, args=(allocator, results))
    second.start()
    second.join(timeout=5)

    store.release_insert.set()
    first.join(timeout=5)

    assert sorted(results) == [1, 1]


def test_serialized_mode_never_hands_out_the_same_number():
    store = BlockingStore()
    allocator = QueueAllocator(store, mode=SERIALIZED)
    results: list[int] = []

    first = threading.Thread(target=_run, args=(allocator, results))
    first.start()
    assert store.insert_started.wait(timeout=5)

    second = threading.Thread(target=_run, args=(allocator, results))
    second.start()
    time.sleep(0.05)
    # the second allocation must not even read the maximum yet
    assert store.reads == 1

    store.release_insert.set()
    first.join(timeout=5)
    second.join(timeout=5)

    assert sorted(results) == [1, 2]
