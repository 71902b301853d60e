"""
services/live_feed.py
---------------------
In-process live subscription over a user's expense records.

Writers publish a full, fresh snapshot after every change; subscribers
recompute everything they show from that snapshot. There is no delta path.
"""

from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Sequence

from utils.logger import get_logger

logger = get_logger(__name__)

Snapshot = tuple[Any, ...]
SnapshotCallback = Callable[[Snapshot], None]


class ExpenseFeed:
    """Per-owner fan-out of record snapshots."""

    def __init__(self):
        self._subscribers: dict[int, list[SnapshotCallback]] = defaultdict(list)

    def subscribe(self, owner_id: int, callback: SnapshotCallback) -> Callable[[], None]:
        """
        Register `callback` for snapshots of `owner_id`.

        Returns:
            An unsubscribe function. Calling it more than once is harmless.
        """
        self._subscribers[owner_id].append(callback)
        logger.info(f"Live feed: user {owner_id} subscribed ({self.subscriber_count(owner_id)} active)")

        released = False

        def unsubscribe() -> None:
            nonlocal released
            if released:
                return
            released = True
            callbacks = self._subscribers.get(owner_id, [])
            if callback in callbacks:
                callbacks.remove(callback)
            if not callbacks:
                self._subscribers.pop(owner_id, None)
            logger.info(f"Live feed: user {owner_id} unsubscribed")

        return unsubscribe

    @contextmanager
    def subscription(self, owner_id: int, callback: SnapshotCallback) -> Iterator[None]:
        """Subscribe for the duration of a `with` block."""
        unsubscribe = self.subscribe(owner_id, callback)
        try:
            yield
        finally:
            unsubscribe()

    def publish(self, owner_id: int, records: Sequence[Any]) -> int:
        """
        Deliver a snapshot of `records` to every subscriber of `owner_id`.

        A failing subscriber is logged and skipped; the others still
        receive the snapshot.

        Returns:
            Number of subscribers that received the snapshot.
        """
        snapshot: Snapshot = tuple(records)
        delivered = 0
        for callback in list(self._subscribers.get(owner_id, [])):
            try:
                callback(snapshot)
                delivered += 1
            except Exception as e:
                logger.error(f"Live feed subscriber failed for user {owner_id}: {e}")
        return delivered

    def subscriber_count(self, owner_id: int) -> int:
        return len(self._subscribers.get(owner_id, []))
