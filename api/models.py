"""
API models for the notification HTTP service.

These Pydantic models define the contract between HTTP callers and the
notification pipeline.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from notifier.config import DecoratorKind


class NotificationRequest(BaseModel):
    """
    Request to send a notification.

    Decorators are applied in list order, innermost first, so
    ["signature", "timestamp"] renders "<timestamp> <signature> <text>".
    """
    text: str = Field(..., min_length=1, description="Notification text")
    decorators: list[DecoratorKind] = Field(
        default_factory=list,
        description="Decorators to wrap the text in, innermost first"
    )


class DeliveryOutcome(BaseModel):
    """Result of delivering through a single strategy."""
    channel: str
    recipient: Optional[str] = None
    success: bool
    error: Optional[str] = None
    timed_out: bool = Field(default=False, description="Abandoned at the strategy deadline")


class NotificationResponse(BaseModel):
    """
    Response from the notification API.

    Returns the rendered content and what happened on each channel.
    """
    request_id: str = Field(..., description="Unique ID for this request")
    content: str = Field(..., description="Content as delivered")
    deliveries: list[DeliveryOutcome] = Field(
        default_factory=list,
        description="Results for each strategy, in registration order"
    )
    observer_failures: list[str] = Field(default_factory=list)
    history_count: int
    timestamp: datetime = Field(default_factory=datetime.now)

    @computed_field
    @property
    def success(self) -> bool:
        """True if every strategy delivered."""
        return all(d.success for d in self.deliveries)


class HistoryResponse(BaseModel):
    """Notifications sent so far, oldest first, rendered now."""
    count: int
    notifications: list[str] = Field(default_factory=list)


class StrategyInfo(BaseModel):
    channel: str
    recipient: Optional[str] = None
