"""
Shared pytest fixtures for the notification pipeline tests.

These fixtures provide fresh pipeline pieces for every test and a fixed
clock so timestamped content can be asserted exactly.
"""

from datetime import datetime

import pytest

from notifier.content import SimpleNotification
from notifier.observable import NotificationObservable
from notifier.observers import NotificationEngine, NotificationLogger
from notifier.service import NotificationService
from notifier.strategies import EmailStrategy, MemorySink, PopUpStrategy, SMSStrategy


FIXED_INSTANT = datetime(2026, 10, 19, 9, 30, 0)


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_INSTANT."""
    return lambda: FIXED_INSTANT


@pytest.fixture
def sink() -> MemorySink:
    """Fresh in-memory sink for captured output."""
    return MemorySink()


@pytest.fixture
def observable() -> NotificationObservable:
    """Fresh fail-fast observable."""
    return NotificationObservable()


@pytest.fixture
def service(observable: NotificationObservable) -> NotificationService:
    """Service publishing into the observable fixture."""
    return NotificationService(observable=observable)


@pytest.fixture
def email_strategy(sink: MemorySink) -> EmailStrategy:
    return EmailStrategy("random.person@gmail.com", sink=sink)


@pytest.fixture
def sms_strategy(sink: MemorySink) -> SMSStrategy:
    return SMSStrategy("+91 9876543210", sink=sink)


@pytest.fixture
def popup_strategy(sink: MemorySink) -> PopUpStrategy:
    return PopUpStrategy(sink=sink)


@pytest.fixture
def engine(observable, email_strategy, sms_strategy, popup_strategy) -> NotificationEngine:
    """Engine with Email, SMS and PopUp registered in that order (not subscribed)."""
    engine = NotificationEngine(observable)
    engine.add_notification_strategy(email_strategy)
    engine.add_notification_strategy(sms_strategy)
    engine.add_notification_strategy(popup_strategy)
    return engine


@pytest.fixture
def notification_logger(observable, sink) -> NotificationLogger:
    """Logger writing into the shared sink (not subscribed)."""
    return NotificationLogger(observable, sink=sink)


@pytest.fixture
def sample_notification() -> SimpleNotification:
    return SimpleNotification("Notification ready")
