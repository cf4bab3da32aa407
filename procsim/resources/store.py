"""Unbounded FIFO store for producer/consumer handoff.

The store keeps two queues: deposits nobody has claimed yet (``put_requests``)
and consumers waiting for an item (``get_requests``). Matching is always
oldest supply against oldest demand, so at any quiescent instant at most one of
the two queues is non-empty.

A deposit is either non-blocking (the producer continues at once) or blocking
(the producer is parked until a consumer takes this exact deposit, and resumes
at the time of consumption).
"""

import itertools
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Iterable, Optional, Tuple

from ..core.process import StoreGet, StorePut, Task
from ..utils.logger import setup_logger

_store_ids = itertools.count(1)


@dataclass
class PutRequest:
    """A deposit waiting for a consumer.

    Attributes:
        item: Deposited item
        task: Producer task, or None for items the store was created with
        blocking: Whether the producer is parked until the item is taken
    """
    item: Any
    task: Optional[Task] = None
    blocking: bool = False


class Store:
    """Synchronous FIFO channel with unbounded capacity."""

    def __init__(self, initial_items: Optional[Iterable[Any]] = None, store_id: Any = None):
        """Initialize store.

        Args:
            initial_items: Items available before any producer runs
            store_id: Identifier; a process-wide counter is used if omitted
        """
        self.id = store_id if store_id is not None else next(_store_ids)
        self.logger = setup_logger(self.__class__.__name__)

        self.put_requests: Deque[PutRequest] = deque(
            PutRequest(item) for item in (initial_items or [])
        )
        self.get_requests: Deque[Task] = deque()

    def request_get(self, task: Task) -> Tuple[bool, Any]:
        """Match a consumer against the oldest deposit, or park it.

        Args:
            task: Consumer task

        Returns:
            Tuple of (resolved now, item)
        """
        if not self.put_requests:
            self.get_requests.append(task)
            return False, None

        deposit = self.put_requests.popleft()
        self.logger.debug(
            f"[{task.sim.current_time}] Store {self.id}: event {task.event.id} "
            f"takes {deposit.item!r}"
        )
        if deposit.blocking and deposit.task is not None:
            # The producer completes at the time of consumption
            task.hand_off(deposit.task)
        return True, deposit.item

    def request_put(self, task: Task, item: Any, blocking: bool = False) -> bool:
        """Hand an item to the oldest waiting consumer, or queue it.

        Args:
            task: Producer task
            item: Item to deposit
            blocking: Park the producer until the item is taken

        Returns:
            True if the producer may continue in this turn
        """
        if self.get_requests:
            consumer = self.get_requests.popleft()
            self.logger.debug(
                f"[{task.sim.current_time}] Store {self.id}: event {consumer.event.id} "
                f"receives {item!r}"
            )
            task.hand_off(consumer, item)
            return True

        self.put_requests.append(PutRequest(item, task, blocking))
        return not blocking

    def __len__(self) -> int:
        """Number of items available to consumers."""
        return len(self.put_requests)

    def __bool__(self) -> bool:
        # An empty store is still a store
        return True

    def __repr__(self) -> str:
        return (
            f"Store(id={self.id}, put_requests={len(self.put_requests)}, "
            f"get_requests={len(self.get_requests)})"
        )


def create_store(initial_items: Optional[Iterable[Any]] = None, store_id: Any = None) -> Store:
    """Create an empty store, or one pre-filled with ``initial_items``."""
    return Store(initial_items, store_id)


def get(sim, event, store: Store):
    """Take the oldest item from ``store``, waiting for one if necessary.

    Use from a process as ``sim, event = yield from get(sim, event, store)``;
    the received item is stored in ``event.item``. Returning the ``(sim, event)``
    pair from the process keeps that item as the payload.
    """
    item = yield StoreGet(store)
    event.item = item
    return sim, event


def put(sim, event, store: Store, item: Any, blocking: bool = False):
    """Deposit ``item`` into ``store``.

    With ``blocking=True`` and no waiting consumer, the calling process is
    suspended until a consumer takes the item.
    """
    yield StorePut(store, item, blocking)
    return sim, event
