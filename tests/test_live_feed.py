"""Tests for the live expense feed."""

import pytest

from services.live_feed import ExpenseFeed


class TestExpenseFeed:

    def test_publish_reaches_owner_subscribers_only(self):
        feed = ExpenseFeed()
        mine, theirs = [], []
        feed.subscribe(1, mine.append)
        feed.subscribe(2, theirs.append)

        assert feed.publish(1, ["a", "b"]) == 1
        assert mine == [("a", "b")]
        assert theirs == []

    def test_snapshot_is_immutable_copy(self):
        feed = ExpenseFeed()
        received = []
        feed.subscribe(1, received.append)
        records = ["a"]
        feed.publish(1, records)
        records.append("b")
        assert received == [("a",)]

    def test_unsubscribe_is_idempotent(self):
        feed = ExpenseFeed()
        received = []
        unsubscribe = feed.subscribe(1, received.append)
        unsubscribe()
        unsubscribe()
        feed.publish(1, ["a"])
        assert received == []
        assert feed.subscriber_count(1) == 0

    def test_subscription_released_on_error(self):
        feed = ExpenseFeed()
        with pytest.raises(RuntimeError):
            with feed.subscription(1, lambda snapshot: None):
                assert feed.subscriber_count(1) == 1
                raise RuntimeError("navigated away")
        assert feed.subscriber_count(1) == 0

    def test_failing_subscriber_does_not_block_others(self):
        feed = ExpenseFeed()
        received = []

        def broken(snapshot):
            raise ValueError("stale consumer")

        feed.subscribe(1, broken)
        feed.subscribe(1, received.append)
        assert feed.publish(1, ["a"]) == 1
        assert received == [("a",)]
