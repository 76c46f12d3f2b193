"""
Scheduler Tests

Tests the virtual-time task queue: ordering, cancellation and disposal.
"""

import pytest

from bossfight.engine.scheduler import TurnScheduler


class TestPosting:

    def test_runs_when_due(self):
        scheduler = TurnScheduler()
        ran = []
        scheduler.post_delta(2000, "reply", lambda: ran.append("reply"))
        assert scheduler.advance(1999) == 0
        assert ran == []
        assert scheduler.advance(1) == 1
        assert ran == ["reply"]
        assert scheduler.now_ms == 2000

    def test_due_order_then_insertion_order(self):
        scheduler = TurnScheduler()
        ran = []
        scheduler.post(500, "b", lambda: ran.append("b"))
        scheduler.post(100, "a", lambda: ran.append("a"))
        scheduler.post(500, "c", lambda: ran.append("c"))
        scheduler.run_all()
        assert ran == ["a", "b", "c"]

    def test_past_rejected(self):
        scheduler = TurnScheduler()
        scheduler.advance(100)
        with pytest.raises(ValueError):
            scheduler.post(50, "late", lambda: None)

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            TurnScheduler().post_delta(-1, "x", lambda: None)

    def test_negative_advance_rejected(self):
        with pytest.raises(ValueError):
            TurnScheduler().advance(-5)

    def test_callback_can_post_followup(self):
        scheduler = TurnScheduler()
        ran = []

        def first():
            ran.append("first")
            scheduler.post_delta(500, "second", lambda: ran.append("second"))

        scheduler.post_delta(1500, "first", first)
        scheduler.advance(2000)
        assert ran == ["first", "second"]
        assert scheduler.tasks_run == 2

    def test_raising_callback_leaves_clock_and_count_consistent(self):
        scheduler = TurnScheduler()
        ran = []

        def fail():
            raise RuntimeError("reply failed")

        scheduler.post_delta(100, "a", lambda: ran.append("a"))
        scheduler.post_delta(200, "fail", fail)
        scheduler.post_delta(300, "c", lambda: ran.append("c"))
        with pytest.raises(RuntimeError):
            scheduler.advance(500)
        assert ran == ["a"]
        assert scheduler.tasks_run == 2
        assert scheduler.now_ms == 200
        assert scheduler.pending_count() == 1

        assert scheduler.advance_to(500) == 1
        assert ran == ["a", "c"]
        assert scheduler.tasks_run == 3
        assert scheduler.now_ms == 500


class TestCancellation:

    def test_cancel_one(self):
        scheduler = TurnScheduler()
        ran = []
        task = scheduler.post_delta(10, "x", lambda: ran.append("x"))
        assert scheduler.cancel(task)
        assert not scheduler.cancel(task)
        scheduler.advance(100)
        assert ran == []
        assert scheduler.pending_count() == 0

    def test_cancel_after_run_is_false(self):
        scheduler = TurnScheduler()
        task = scheduler.post_delta(10, "x", lambda: None)
        scheduler.advance(10)
        assert not scheduler.cancel(task)

    def test_cancel_all_disposes(self):
        scheduler = TurnScheduler()
        ran = []
        scheduler.post_delta(10, "a", lambda: ran.append("a"))
        scheduler.post_delta(20, "b", lambda: ran.append("b"))
        assert scheduler.cancel_all() == 2
        assert scheduler.disposed

        late = scheduler.post_delta(5, "late", lambda: ran.append("late"))
        assert late.cancelled
        assert scheduler.advance(1000) == 0
        assert ran == []

    def test_peek_time_skips_cancelled(self):
        scheduler = TurnScheduler()
        first = scheduler.post(10, "a", lambda: None)
        scheduler.post(30, "b", lambda: None)
        scheduler.cancel(first)
        assert scheduler.peek_time() == 30
        assert scheduler.pending_count() == 1

    def test_empty_peek(self):
        assert TurnScheduler().peek_time() == float("inf")
