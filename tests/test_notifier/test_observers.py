"""
Tests for the logger and engine observers.

These tests verify that the engine fans one rendered string out to every
strategy in registration order and that a failing strategy does not stop
the others.
"""

import time

from notifier.content import SignatureDecorator, SimpleNotification
from notifier.errors import DeliveryError
from notifier.observers import NotificationEngine, NotificationLogger
from notifier.strategies import EmailStrategy, LoggingSink, MemorySink, PopUpStrategy, SMSStrategy


class RecordingStrategy:
    """Strategy that records calls into a shared list."""

    def __init__(self, name: str, calls: list):
        self.channel = name
        self.calls = calls

    def send_notification(self, content: str) -> None:
        self.calls.append((self.channel, content))


class UnreachableStrategy:
    channel = "webhook"
    recipient = "https://hooks.example.com"

    def send_notification(self, content: str) -> None:
        raise DeliveryError(self.channel, self.recipient, "connection refused")


class SlowStrategy:
    channel = "slow"

    def send_notification(self, content: str) -> None:
        time.sleep(0.5)


class SlowEmailStrategy(EmailStrategy):
    """Email strategy that takes a while to render its message."""

    def _format(self, content: str) -> str:
        time.sleep(0.2)
        return super()._format(content)


class SlowSink(MemorySink):
    def __call__(self, message: str) -> None:
        time.sleep(0.2)
        super().__call__(message)


class TestNotificationLogger:
    """Tests for the logger observer."""

    def test_records_current_content(self, observable, notification_logger, sink):
        observable.subscribe(notification_logger)

        observable.set_notification(SimpleNotification("Hello"))

        assert notification_logger.entries == ["Hello"]
        assert sink.messages == ["New notification: Hello"]

    def test_default_sink_uses_logging(self, observable, caplog):
        import logging

        observable.subscribe(NotificationLogger(observable))

        with caplog.at_level(logging.INFO, logger="notification_log"):
            observable.set_notification(SimpleNotification("Logged"))

        assert any("New notification: Logged" in r.message for r in caplog.records)

    def test_default_sink_matches_strategies(self, observable):
        assert isinstance(NotificationLogger(observable).sink, LoggingSink)

    def test_entries_are_bounded(self, observable, sink):
        """Only the most recent entries are kept; every one is still written."""
        notification_logger = NotificationLogger(observable, sink=sink, max_entries=2)
        observable.subscribe(notification_logger)

        for text in ("first", "second", "third"):
            observable.set_notification(SimpleNotification(text))

        assert notification_logger.entries == ["second", "third"]
        assert len(sink.messages) == 3


class TestNotificationEngine:
    """Tests for strategy fan-out."""

    def test_all_strategies_receive_identical_content(
        self, observable, engine, email_strategy, sms_strategy, popup_strategy
    ):
        observable.subscribe(engine)

        observable.set_notification(SignatureDecorator(SimpleNotification("Notification ready")))

        expected = "Sample signature Notification ready"
        for strategy in (email_strategy, sms_strategy, popup_strategy):
            assert [m.body for m in strategy.sent_messages] == [expected]

    def test_strategies_called_in_registration_order(self, observable, engine, sink):
        observable.subscribe(engine)

        observable.set_notification(SimpleNotification("Hi"))

        assert [m.split("\n")[0] for m in sink.messages] == [
            "Sending Email notification on random.person@gmail.com",
            "Sending SMS notification on +91 9876543210",
            "Sending pop up notification",
        ]

    def test_dispatch_returns_result_per_strategy(self, engine):
        results = engine.dispatch("Direct")

        assert [r.channel for r in results] == ["email", "sms", "popup"]
        assert all(r.success for r in results)
        assert all(r.body == "Direct" for r in results)

    def test_update_stores_last_results(self, observable, engine):
        observable.subscribe(engine)

        observable.set_notification(SimpleNotification("Hi"))

        assert len(engine.last_results) == 3

    def test_failure_does_not_stop_fan_out(self, observable):
        calls = []
        engine = NotificationEngine(
            observable,
            strategies=[
                RecordingStrategy("first", calls),
                UnreachableStrategy(),
                RecordingStrategy("last", calls),
            ],
        )

        results = engine.dispatch("Hi")

        assert calls == [("first", "Hi"), ("last", "Hi")]
        assert [r.success for r in results] == [True, False, True]
        assert "connection refused" in results[1].error
        assert results[1].recipient == "https://hooks.example.com"

    def test_simulated_channel_failure(self, observable, sink):
        engine = NotificationEngine(
            observable,
            strategies=[
                EmailStrategy("a@example.com", sink=sink),
                SMSStrategy("+1-555-0001", sink=sink, fail_rate=1.0),
                PopUpStrategy(sink=sink),
            ],
        )

        results = engine.dispatch("Hi")

        assert [r.success for r in results] == [True, False, True]
        assert len(sink.messages) == 2

    def test_remove_strategy(self, engine, sms_strategy):
        assert engine.remove_notification_strategy(sms_strategy) is True

        results = engine.dispatch("Hi")

        assert [r.channel for r in results] == ["email", "popup"]

    def test_remove_absent_strategy_is_noop(self, engine):
        assert engine.remove_notification_strategy(PopUpStrategy()) is False
        assert len(engine.strategies) == 3

    def test_no_strategies(self, observable):
        engine = NotificationEngine(observable)

        assert engine.dispatch("Hi") == []

    def test_strategy_timeout(self, observable):
        calls = []
        engine = NotificationEngine(
            observable,
            strategies=[SlowStrategy(), RecordingStrategy("fast", calls)],
            strategy_timeout=0.05,
        )

        results = engine.dispatch("Hi")

        assert results[0].success is False
        assert "timed out" in results[0].error
        assert results[0].timed_out is True
        assert results[1].success is True
        assert calls == [("fast", "Hi")]

    def test_abandoned_delivery_is_not_written(self, observable, sink):
        """A delivery reported as timed out never reaches the sink later."""
        strategy = SlowEmailStrategy("a@x.com", sink=sink)
        engine = NotificationEngine(observable, strategies=[strategy], strategy_timeout=0.05)

        results = engine.dispatch("Hi")
        time.sleep(0.4)

        assert results[0].success is False
        assert results[0].timed_out is True
        assert sink.messages == []
        assert strategy.get_successful_sends() == []
        assert [m.timed_out for m in strategy.sent_messages] == [True]

    def test_delivery_already_writing_is_awaited(self, observable):
        """Once the sink write has begun, the engine waits for it and reports success."""
        sink = SlowSink()
        strategy = EmailStrategy("a@x.com", sink=sink)
        engine = NotificationEngine(observable, strategies=[strategy], strategy_timeout=0.05)

        results = engine.dispatch("Hi")

        assert results[0].success is True
        assert results[0].timed_out is False
        assert sink.messages == ["Sending Email notification on a@x.com\nHi"]
        assert len(strategy.get_successful_sends()) == 1

    def test_timeout_not_hit_by_fast_strategy(self, observable):
        calls = []
        engine = NotificationEngine(
            observable,
            strategies=[RecordingStrategy("fast", calls)],
            strategy_timeout=5,
        )

        results = engine.dispatch("Hi")

        assert results[0].success is True
        assert calls == [("fast", "Hi")]


class TestCascade:
    """Tests for logger and engine subscribed together."""

    def test_logger_runs_before_engine(self, observable, notification_logger, engine, sink):
        observable.subscribe(notification_logger)
        observable.subscribe(engine)

        observable.set_notification(SimpleNotification("Order shipped"))

        assert sink.messages[0] == "New notification: Order shipped"
        assert sink.messages[1].startswith("Sending Email notification")
        assert len(sink.messages) == 4
