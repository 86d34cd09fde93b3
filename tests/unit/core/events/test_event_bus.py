"""Tests for EventBus, LogEvent and StatusSnapshot."""

from __future__ import annotations

import time

import pytest

from sealbot.core.events.bus import EventBus, LogEvent, StatusSnapshot
from sealbot.core.events.types import LogLevel
from tests.pytest_plugins.fakes import EventRecorder


# ============================================================================
# LOG EVENT TESTS
# ============================================================================


class TestLogEvent:
    """Tests for the LogEvent dataclass."""

    def test_defaults(self):
        """Test LogEvent creation with only level and message."""
        before = time.time()
        event = LogEvent(level=LogLevel.INFO, message="hello")
        assert event.metadata == {}
        assert before <= event.timestamp <= time.time()
        assert len(event.id) == 36  # UUID format

    def test_icon_follows_level(self):
        assert LogEvent(level=LogLevel.SUCCESS, message="ok").icon == "✅"
        assert LogEvent(level=LogLevel.ERROR, message="bad").icon == "🚨"

    def test_to_dict(self):
        event = LogEvent(level=LogLevel.WARN, message="careful", metadata={"k": 1})
        data = event.to_dict()
        assert data["level"] == "WARN"
        assert data["message"] == "careful"
        assert data["metadata"] == {"k": 1}
        assert data["icon"] == "⚠️"


class TestLogLevel:
    """Tests for LogLevel parsing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("info", LogLevel.INFO),
            (" Success ", LogLevel.SUCCESS),
            ("WARNING", LogLevel.WARN),
            ("warn", LogLevel.WARN),
            ("wait", LogLevel.WAIT),
        ],
    )
    def test_from_string(self, raw, expected):
        assert LogLevel.from_string(raw) == expected

    def test_unknown_level_raises(self):
        with pytest.raises(ValueError):
            LogLevel.from_string("verbose")


# ============================================================================
# LOG CHANNEL TESTS
# ============================================================================


class TestEmit:
    """Tests for emitting log events."""

    def test_subscribers_receive_events_in_order(self, events, recorder):
        """Test that events are delivered in emission order."""
        events.info("one")
        events.success("two")
        events.wait("three")
        assert recorder.messages() == ["one", "two", "three"]
        assert [e.level for e in recorder.events] == [
            LogLevel.INFO,
            LogLevel.SUCCESS,
            LogLevel.WAIT,
        ]

    def test_emit_accepts_level_string(self, events, recorder):
        event = events.emit("warning", "disk almost full")
        assert event.level == LogLevel.WARN
        assert recorder.events == [event]

    def test_metadata_is_attached(self, events):
        event = events.info("loaded", wallet_index=2)
        assert event.metadata == {"wallet_index": 2}

    def test_every_subscriber_receives_each_event(self, events):
        first, second = EventRecorder(), EventRecorder()
        events.subscribe(first)
        events.subscribe(second)
        events.info("broadcast")
        assert first.messages() == ["broadcast"]
        assert second.messages() == ["broadcast"]

    def test_unsubscribe_stops_delivery(self, events):
        rec = EventRecorder()
        unsubscribe = events.subscribe(rec)
        events.info("before")
        unsubscribe()
        events.info("after")
        assert rec.messages() == ["before"]

    def test_unsubscribe_twice_is_harmless(self, events):
        unsubscribe = events.subscribe(EventRecorder())
        unsubscribe()
        unsubscribe()


class TestErrorHelper:
    """Tests for EventBus.error message formatting."""

    def test_exception_details_appended(self, events):
        event = events.error("Upload failed", RuntimeError("boom"))
        assert event.level == LogLevel.ERROR
        assert event.message == "Upload failed | Error: boom"
        assert event.metadata["error_type"] == "RuntimeError"

    def test_string_details_appended(self, events):
        event = events.error("Transaction failed", "MoveAbort")
        assert event.message == "Transaction failed | Details: MoveAbort"

    def test_no_details(self, events):
        assert events.error("Plain").message == "Plain"


class TestHistory:
    """Tests for the bounded history buffer."""

    def test_history_keeps_most_recent_events(self):
        """Test that the buffer keeps exactly the last N events in order."""
        bus = EventBus(history_size=1000)
        for i in range(1500):
            bus.info(f"event {i}")

        history = bus.history
        assert len(history) == 1000
        assert history[0].message == "event 500"
        assert history[-1].message == "event 1499"
        assert bus.stats["events_emitted"] == 1500

    def test_default_capacity(self, events):
        assert events.history_size == 1000

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            EventBus(history_size=0)


class TestHandlerIsolation:
    """Tests that a failing subscriber never affects the others."""

    def test_failing_handler_does_not_block_others(self, events):
        """Test that later subscribers still receive the event."""

        def broken(event):
            raise RuntimeError("handler crashed")

        rec = EventRecorder()
        events.subscribe(broken)
        events.subscribe(rec)

        events.info("payload")

        assert "payload" in rec.messages()
        assert events.stats["handler_errors"] >= 1

    def test_failure_reported_as_warning(self, events):
        def broken(event):
            raise RuntimeError("handler crashed")

        rec = EventRecorder()
        events.subscribe(rec)
        events.subscribe(broken)

        events.info("payload")

        warnings = rec.messages(LogLevel.WARN)
        assert len(warnings) == 1
        assert "broken" in warnings[0]
        assert "handler crashed" in warnings[0]

    def test_handler_failing_on_every_event_does_not_recurse(self, events):
        calls = []

        def always_broken(event):
            calls.append(event.message)
            raise ValueError("nope")

        events.subscribe(always_broken)
        events.info("payload")

        # Original event plus the single WARN about the failure
        assert len(calls) == 2
        assert len(events.history) == 2

    def test_failing_status_handler_isolated(self, events, recorder):
        received = []

        def broken(status):
            raise RuntimeError("status handler crashed")

        events.subscribe_status(broken)
        events.subscribe_status(received.append)

        events.publish_status(overall_status="Running")

        assert received[0].overall_status == "Running"
        assert recorder.has(LogLevel.WARN, "status handler crashed")


# ============================================================================
# STATUS CHANNEL TESTS
# ============================================================================


class TestStatus:
    """Tests for status snapshot publication."""

    def test_initial_status(self, events):
        assert events.status == StatusSnapshot()
        assert events.status.overall_status == "Idle"

    def test_partial_updates_merge(self, events):
        """Test that each update only replaces the given fields."""
        events.publish_status(total_wallets=3, overall_status="Running")
        events.publish_status({"wallet_index": 2})
        status = events.status
        assert status.total_wallets == 3
        assert status.wallet_index == 2
        assert status.overall_status == "Running"

    def test_subscribers_receive_full_snapshot(self, events):
        received = []
        events.subscribe_status(received.append)
        events.publish_status(total_wallets=2)
        events.publish_status(repetition=1)
        assert received[-1].total_wallets == 2
        assert received[-1].repetition == 1
        assert events.stats["status_updates"] == 2

    def test_unknown_field_rejected(self, events):
        with pytest.raises(ValueError, match="bogus"):
            events.publish_status(bogus=1)

    def test_snapshots_are_immutable(self, events):
        snapshot = events.publish_status(active_bots=1)
        events.publish_status(active_bots=0)
        assert snapshot.active_bots == 1
