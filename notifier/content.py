"""
Notification content and the decorator chain that builds it.

A notification is anything with a get_content() method. SimpleNotification
holds fixed text; decorators wrap another notification and transform its
output. Chains are built bottom-up and never edited afterwards:

    content = TimeStampDecorator(SignatureDecorator(SimpleNotification("Hi")))
    content.get_content()  # "2026-10-19 09:30:00 Sample signature Hi"

The outermost decorator runs last, so with prepending decorators its text
appears first.
"""

from datetime import datetime
from typing import Callable, Optional, Protocol


DEFAULT_SIGNATURE = "Sample signature"
DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Returns the instant used by TimeStampDecorator
Clock = Callable[[], datetime]


class NotificationContent(Protocol):
    """Anything that can render itself as notification text."""

    def get_content(self) -> str:  # pragma: no cover - Protocol
        ...


class SimpleNotification:
    """Plain text notification. Terminal node of every chain."""

    def __init__(self, text: str):
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    def get_content(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"SimpleNotification({self._text!r})"


class NotificationDecorator:
    """
    Wraps another notification and transforms its rendered text.

    Args:
        notification: The inner notification being decorated
        transform: Applied to the inner content on every render
    """

    def __init__(self, notification: NotificationContent, transform: Callable[[str], str]):
        self._notification = notification
        self._transform = transform

    @property
    def inner(self) -> NotificationContent:
        """The wrapped notification."""
        return self._notification

    def get_content(self) -> str:
        return self._transform(self._notification.get_content())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._notification!r})"


class SignatureDecorator(NotificationDecorator):
    """Prepends a signature line to the inner content."""

    def __init__(self, notification: NotificationContent, signature: str = DEFAULT_SIGNATURE):
        self.signature = signature
        super().__init__(notification, self._sign)

    def _sign(self, content: str) -> str:
        return f"{self.signature} {content}"


class TimeStampDecorator(NotificationDecorator):
    """
    Prepends the render time to the inner content.

    This is the one decorator whose output changes between calls. Pass a
    fixed clock to make it deterministic.
    """

    def __init__(
        self,
        notification: NotificationContent,
        clock: Optional[Clock] = None,
        fmt: str = DEFAULT_TIMESTAMP_FORMAT,
    ):
        self.clock = clock or datetime.now
        self.fmt = fmt
        super().__init__(notification, self._stamp)

    def _stamp(self, content: str) -> str:
        return f"{self.clock().strftime(self.fmt)} {content}"


def decorate(
    notification: NotificationContent,
    *decorators: Callable[[NotificationContent], NotificationContent],
) -> NotificationContent:
    """
    Wrap a notification in each decorator, innermost first.

    decorate(base, SignatureDecorator, TimeStampDecorator) is the same chain
    as TimeStampDecorator(SignatureDecorator(base)).
    """
    for wrap in decorators:
        notification = wrap(notification)
    return notification
