"""Event queue implementation for discrete event simulation."""

import heapq
import itertools
from typing import List, Optional, Tuple

from .event import Event


class EventQueue:
    """Priority queue for managing admitted events.

    Events are ordered by due time, with earlier events processed first.
    Events due at the same time leave the queue in admission order.
    """

    def __init__(self):
        """Initialize empty event queue."""
        self._queue: List[Tuple[float, int, Event]] = []
        self._admissions = itertools.count()

    def push(self, event: Event) -> None:
        """Add event to the queue.

        Args:
            event: Event to add
        """
        heapq.heappush(self._queue, (event.scheduled_at, next(self._admissions), event))

    def pop(self) -> Event:
        """Remove and return the next event.

        Returns:
            Next event to process

        Raises:
            IndexError: If queue is empty
        """
        if self.is_empty():
            raise IndexError("Cannot pop from empty event queue")
        return heapq.heappop(self._queue)[-1]

    def peek(self) -> Optional[Event]:
        """Return the next event without removing it.

        Returns:
            Next event, or None if queue is empty
        """
        return self._queue[0][-1] if self._queue else None

    def is_empty(self) -> bool:
        """Check if queue is empty."""
        return len(self._queue) == 0

    def size(self) -> int:
        """Get number of events in queue."""
        return len(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        return f"EventQueue(size={len(self._queue)}, next={self.peek()})"
