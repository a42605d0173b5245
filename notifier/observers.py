"""
Observers of the notification observable.

NotificationLogger records every notification to a side channel.
NotificationEngine fans each notification out to its delivery strategies.

Both pull the rendered content from the observable they watch when
update() is called. The observable owns the subscription; the observers
only keep a plain reference back to it.
"""

import logging
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Iterable, Optional

from notifier.errors import DeliveryTimeoutError
from notifier.observable import NotificationObservable
from notifier.strategies import (
    BaseStrategy,
    DeliveryResult,
    DeliveryTicket,
    LoggingSink,
    NotificationStrategy,
    Sink,
)

logger = logging.getLogger("notification_engine")


class NotificationLogger:
    """
    Records each new notification.

    Writes "New notification: <content>" to its sink (the
    "notification_log" logger by default) and keeps the most recent
    max_entries rendered entries for inspection.
    """

    DEFAULT_MAX_ENTRIES = 1000

    def __init__(
        self,
        observable: NotificationObservable,
        sink: Optional[Sink] = None,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        self.observable = observable
        self.sink = sink or LoggingSink(logging.getLogger("notification_log"))
        self._entries: deque[str] = deque(maxlen=max_entries)

    @property
    def entries(self) -> list[str]:
        """Recently logged content, oldest first."""
        return list(self._entries)

    def update(self) -> None:
        content = self.observable.get_notification_content()
        self._entries.append(content)
        self.sink(f"New notification: {content}")


def _channel_name(strategy: NotificationStrategy) -> str:
    channel = getattr(strategy, "channel", None)
    if channel is None:
        return type(strategy).__name__
    return getattr(channel, "value", str(channel))


class NotificationEngine:
    """
    Delivers each notification through every registered strategy.

    Strategies are called in registration order with the same rendered
    text. A strategy that raises is reported as a failed DeliveryResult; one
    that exceeds strategy_timeout is reported with timed_out set. The
    remaining strategies still run.

    Example:
        engine = NotificationEngine(observable)
        engine.add_notification_strategy(EmailStrategy("alice@example.com"))
        engine.add_notification_strategy(PopUpStrategy())
        observable.subscribe(engine)
    """

    def __init__(
        self,
        observable: NotificationObservable,
        strategies: Optional[Iterable[NotificationStrategy]] = None,
        strategy_timeout: Optional[float] = None,
    ):
        """
        Args:
            observable: The observable this engine reads content from
            strategies: Initial strategies, in delivery order
            strategy_timeout: Seconds each strategy call may take, or None
                for no limit
        """
        self.observable = observable
        self.strategy_timeout = strategy_timeout
        self._strategies: list[NotificationStrategy] = list(strategies or [])
        self._lock = threading.Lock()
        self.last_results: list[DeliveryResult] = []

    @property
    def strategies(self) -> list[NotificationStrategy]:
        """Snapshot of registered strategies, in registration order."""
        with self._lock:
            return list(self._strategies)

    def add_notification_strategy(self, strategy: NotificationStrategy) -> None:
        with self._lock:
            self._strategies.append(strategy)
        logger.debug(f"Registered {strategy!r}")

    def remove_notification_strategy(self, strategy: NotificationStrategy) -> bool:
        """
        Remove the first registration of a strategy.

        Returns:
            True if the strategy was found and removed, False otherwise
        """
        with self._lock:
            try:
                self._strategies.remove(strategy)
            except ValueError:
                return False
        logger.debug(f"Removed {strategy!r}")
        return True

    def update(self) -> None:
        content = self.observable.get_notification_content()
        self.last_results = self.dispatch(content)

    def dispatch(self, content: str) -> list[DeliveryResult]:
        """
        Send content through every strategy.

        Returns:
            One DeliveryResult per strategy, in registration order
        """
        results = [self._deliver(strategy, content) for strategy in self.strategies]

        failed = [r for r in results if not r.success]
        if failed:
            logger.warning(f"{len(failed)} of {len(results)} deliveries failed")
        return results

    def _deliver(self, strategy: NotificationStrategy, content: str) -> DeliveryResult:
        channel = _channel_name(strategy)
        recipient = getattr(strategy, "recipient", None)

        try:
            self._call(strategy, content)
        except DeliveryTimeoutError as e:
            logger.error(f"[{channel.upper()} TIMED OUT] {strategy!r}: {e}")
            return DeliveryResult(False, channel, recipient, content, error=str(e), timed_out=True)
        except Exception as e:
            logger.error(f"[{channel.upper()} FAILED] {strategy!r}: {e}")
            return DeliveryResult(False, channel, recipient, content, error=str(e))

        return DeliveryResult(True, channel, recipient, content)

    def _call(self, strategy: NotificationStrategy, content: str) -> None:
        if self.strategy_timeout is None:
            strategy.send_notification(content)
            return

        # Bundled strategies take a ticket and drop the write once abandoned.
        # Any other strategy that overruns keeps running on its worker thread.
        ticket = DeliveryTicket() if isinstance(strategy, BaseStrategy) else None
        args = (content,) if ticket is None else (content, ticket)

        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(strategy.send_notification, *args)
            try:
                future.result(timeout=self.strategy_timeout)
            except FutureTimeoutError:
                if ticket is not None and not ticket.cancel():
                    # Already writing to its sink
                    future.result()
                    return
                raise DeliveryTimeoutError(
                    _channel_name(strategy),
                    getattr(strategy, "recipient", None) or "-",
                    f"timed out after {self.strategy_timeout}s",
                ) from None
        finally:
            executor.shutdown(wait=False)
