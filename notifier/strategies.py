"""
Delivery strategies for rendered notifications.

Each strategy delivers the final text through one channel. Nothing is sent
over the network: output goes to a sink, which by default writes through the
logging module. Tests pass a MemorySink to capture what was delivered.

Design decisions:
- All strategies share one method, send_notification(content)
- Strategies track their own deliveries for test assertions
- Channel failures can be simulated with fail_rate and raise DeliveryError
- A delivery abandoned on timeout never reaches the sink (see DeliveryTicket)
- No state is shared between strategies
"""

import logging
import random
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Protocol

from notifier.errors import DeliveryError

logger = logging.getLogger("notifications")

# Receives one fully formatted delivery message
Sink = Callable[[str], None]


class ChannelType(str, Enum):
    """Supported delivery channels."""
    EMAIL = "email"
    SMS = "sms"
    POPUP = "popup"


@dataclass
class DeliveryResult:
    """
    Outcome of one strategy handling one notification.

    Captures success/failure and metadata for debugging and testing.
    """
    success: bool
    channel: str
    recipient: Optional[str]  # None for pop-ups
    body: str
    timestamp: datetime = field(default_factory=datetime.now)
    error: Optional[str] = None
    timed_out: bool = False  # abandoned at the deadline, never written to the sink

    def __str__(self) -> str:
        status = "✓" if self.success else "✗"
        target = f" to {self.recipient}" if self.recipient else ""
        text = f"{status} {self.channel.upper()}{target}: {self.body[:50]}"
        if self.error:
            text += f" ({self.error})"
        elif self.timed_out:
            text += " (timed out)"
        return text


class DeliveryTicket:
    """
    Settles the race between a delivery and its deadline.

    The strategy calls start() just before writing to its sink; the engine
    calls cancel() when the deadline passes. Whichever comes first wins and
    the other call returns False, so a delivery is either written or
    abandoned, never both.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._state: Optional[str] = None

    def start(self) -> bool:
        with self._lock:
            if self._state is None:
                self._state = "started"
            return self._state == "started"

    def cancel(self) -> bool:
        with self._lock:
            if self._state is None:
                self._state = "cancelled"
            return self._state == "cancelled"

    @property
    def cancelled(self) -> bool:
        return self._state == "cancelled"


class LoggingSink:
    """Default sink: writes each delivery to a logger at INFO."""

    def __init__(self, logger_: Optional[logging.Logger] = None):
        self._logger = logger_ or logger

    def __call__(self, message: str) -> None:
        self._logger.info(message)


class MemorySink:
    """Collects delivered messages in memory."""

    def __init__(self):
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    def clear(self) -> None:
        self.messages.clear()


class NotificationStrategy(Protocol):
    """Delivers final notification text through a single channel."""

    channel: str

    def send_notification(self, content: str) -> None:  # pragma: no cover - Protocol
        ...


class BaseStrategy(ABC):
    """
    Shared plumbing for the bundled strategies.

    Subclasses set `channel` and implement _format(). Delivery writes the
    formatted message to the sink and records a DeliveryResult. When a
    simulated failure occurs, the failed result is recorded and
    DeliveryError is raised for the caller to handle.

    When the engine runs a delivery under a deadline it passes a
    DeliveryTicket. If the ticket was cancelled before the sink write, the
    message is dropped and a timed-out result is recorded instead.
    """

    channel: ChannelType

    def __init__(self, sink: Optional[Sink] = None, fail_rate: float = 0.0):
        """
        Args:
            sink: Where formatted deliveries are written. Defaults to logging.
            fail_rate: Probability of send failure (0.0 to 1.0), for testing.
        """
        self.sink = sink or LoggingSink()
        self.fail_rate = fail_rate
        self.sent_messages: list[DeliveryResult] = []

    @property
    def recipient(self) -> Optional[str]:
        return None

    @abstractmethod
    def _format(self, content: str) -> str:
        """Render the channel-specific message for content."""

    def send_notification(self, content: str, ticket: Optional[DeliveryTicket] = None) -> None:
        message = self._format(content)

        if ticket is not None and not ticket.start():
            logger.warning(f"[{self.channel.value.upper()}] Dropped delivery abandoned at its deadline")
            self.sent_messages.append(DeliveryResult(
                success=False,
                channel=self.channel.value,
                recipient=self.recipient,
                body=content,
                timed_out=True,
            ))
            return

        if random.random() < self.fail_rate:
            error = f"Simulated {self.channel.value} delivery failure"
            self.sent_messages.append(DeliveryResult(
                success=False,
                channel=self.channel.value,
                recipient=self.recipient,
                body=content,
                error=error,
            ))
            raise DeliveryError(self.channel.value, self.recipient or "popup", error)

        self.sink(message)
        self.sent_messages.append(DeliveryResult(
            success=True,
            channel=self.channel.value,
            recipient=self.recipient,
            body=content,
        ))

    def get_sent_count(self) -> int:
        """Get the number of deliveries attempted (for testing)."""
        return len(self.sent_messages)

    def get_successful_sends(self) -> list[DeliveryResult]:
        return [m for m in self.sent_messages if m.success]

    def clear_history(self):
        """Clear delivery history (useful between tests)."""
        self.sent_messages.clear()

    def __repr__(self) -> str:
        if self.recipient:
            return f"{type(self).__name__}({self.recipient!r})"
        return f"{type(self).__name__}()"


class EmailStrategy(BaseStrategy):
    """Sends the notification to an email address."""

    channel = ChannelType.EMAIL

    def __init__(self, email: str, sink: Optional[Sink] = None, fail_rate: float = 0.0):
        super().__init__(sink=sink, fail_rate=fail_rate)
        self.email = email

    @property
    def recipient(self) -> str:
        return self.email

    def _format(self, content: str) -> str:
        return f"Sending Email notification on {self.email}\n{content}"


class SMSStrategy(BaseStrategy):
    """
    Sends the notification as a text message.

    Messages longer than MAX_LENGTH are still delivered but logged as a
    warning, since carriers will split them.
    """

    MAX_LENGTH = 160

    channel = ChannelType.SMS

    def __init__(self, mobile_number: str, sink: Optional[Sink] = None, fail_rate: float = 0.0):
        super().__init__(sink=sink, fail_rate=fail_rate)
        self.mobile_number = mobile_number

    @property
    def recipient(self) -> str:
        return self.mobile_number

    def send_notification(self, content: str, ticket: Optional[DeliveryTicket] = None) -> None:
        if len(content) > self.MAX_LENGTH:
            logger.warning(
                f"[SMS] Message length ({len(content)}) exceeds {self.MAX_LENGTH} chars, "
                "may be split into multiple messages"
            )
        super().send_notification(content, ticket)

    def _format(self, content: str) -> str:
        return f"Sending SMS notification on {self.mobile_number}\n{content}"


class PopUpStrategy(BaseStrategy):
    """Shows the notification as a pop-up. Has no recipient."""

    channel = ChannelType.POPUP

    def _format(self, content: str) -> str:
        return f"Sending pop up notification\n{content}"
