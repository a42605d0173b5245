"""
Demonstration scripts for the notification pipeline.

These functions wire a pipeline by hand and send sample notifications so
the cascade (logger first, then every delivery strategy) is visible in the
logs.
"""

import logging

from notifier.content import SignatureDecorator, SimpleNotification, TimeStampDecorator
from notifier.observable import NotificationObservable
from notifier.observers import NotificationEngine, NotificationLogger
from notifier.service import NotificationService
from notifier.strategies import DeliveryResult, EmailStrategy, PopUpStrategy, SMSStrategy

# Configure logging to see what's happening
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)


def run_order_shipped_demo() -> list[DeliveryResult]:
    """
    Send one decorated notification through a logger and three channels.

    This shows:
    1. Content built bottom-up: text, then signature, then timestamp
    2. The service recording it and publishing it to the observable
    3. The logger recording it before the engine delivers it
    4. Email, SMS and pop-up each receiving the same text
    """
    print("\n" + "=" * 70)
    print("DEMO: Order Shipped Notification")
    print("=" * 70 + "\n")

    service = NotificationService()
    observable = service.observable

    notification_logger = NotificationLogger(observable)
    engine = NotificationEngine(observable)
    engine.add_notification_strategy(EmailStrategy("random.person@gmail.com"))
    engine.add_notification_strategy(SMSStrategy("+91 9876543210"))
    engine.add_notification_strategy(PopUpStrategy())

    observable.subscribe(notification_logger)
    observable.subscribe(engine)

    notification = SimpleNotification("Your order has been shipped!")
    notification = SignatureDecorator(notification)
    notification = TimeStampDecorator(notification)

    print("-" * 70)
    print("ACTION: Sending notification")
    print("-" * 70 + "\n")

    service.send_notification(notification)

    print("\nDeliveries:")
    for result in engine.last_results:
        print(f"  {result}")

    return engine.last_results


def run_channel_failure_demo() -> list[DeliveryResult]:
    """
    Show that one unreachable channel does not stop the others.

    The SMS strategy always fails; email and pop-up still deliver and the
    failure is reported in the results.
    """
    print("\n" + "=" * 70)
    print("DEMO: Channel Failure")
    print("=" * 70 + "\n")

    observable = NotificationObservable(fail_fast=False)
    service = NotificationService(observable=observable)

    engine = NotificationEngine(
        observable,
        strategies=[
            EmailStrategy("random.person@gmail.com"),
            SMSStrategy("+91 9876543210", fail_rate=1.0),
            PopUpStrategy(),
        ],
    )
    observable.subscribe(engine)

    service.send_notification(SignatureDecorator(SimpleNotification("Payment received")))

    print("\nDeliveries:")
    for result in engine.last_results:
        print(f"  {result}")

    return engine.last_results


if __name__ == "__main__":
    print("\nRunning Notification Pipeline Demos")
    print("=" * 70)

    run_order_shipped_demo()
    print("\n")

    run_channel_failure_demo()
