"""
Pipeline configuration.

Describes which observers to attach, which delivery strategies the engine
uses and how decorators render. Configuration lives in a JSON file
(data/pipeline.json by default) and is validated with Pydantic:

    {
        "observers": ["logger", "engine"],
        "strategies": [
            {"type": "email", "email": "random.person@gmail.com"},
            {"type": "sms", "mobile_number": "+91 9876543210"},
            {"type": "popup"}
        ]
    }

build_pipeline() turns a config into a wired NotificationService.
"""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from notifier.content import (
    DEFAULT_SIGNATURE,
    DEFAULT_TIMESTAMP_FORMAT,
    Clock,
    NotificationContent,
    SignatureDecorator,
    SimpleNotification,
    TimeStampDecorator,
)
from notifier.errors import ConfigError
from notifier.observable import NotificationObservable
from notifier.observers import NotificationEngine, NotificationLogger
from notifier.service import NotificationService
from notifier.strategies import (
    BaseStrategy,
    ChannelType,
    EmailStrategy,
    PopUpStrategy,
    SMSStrategy,
    Sink,
)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "data" / "pipeline.json"


class ObserverKind(str, Enum):
    """Observers that can be attached from configuration."""
    LOGGER = "logger"
    ENGINE = "engine"


class DecoratorKind(str, Enum):
    """Decorators that can be applied by name."""
    SIGNATURE = "signature"
    TIMESTAMP = "timestamp"


class StrategyConfig(BaseModel):
    """One delivery strategy registered on the engine."""
    type: ChannelType = Field(..., description="Delivery channel")
    email: Optional[str] = Field(default=None, description="Destination address (email only)")
    mobile_number: Optional[str] = Field(default=None, description="Destination number (sms only)")
    fail_rate: float = Field(default=0.0, ge=0, le=1, description="Simulated failure probability")

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_destination(self) -> "StrategyConfig":
        if self.type == ChannelType.EMAIL and not self.email:
            raise ValueError("email strategy requires 'email'")
        if self.type == ChannelType.SMS and not self.mobile_number:
            raise ValueError("sms strategy requires 'mobile_number'")
        return self

    def build(self, sink: Optional[Sink] = None) -> BaseStrategy:
        if self.type == ChannelType.EMAIL:
            return EmailStrategy(self.email, sink=sink, fail_rate=self.fail_rate)
        if self.type == ChannelType.SMS:
            return SMSStrategy(self.mobile_number, sink=sink, fail_rate=self.fail_rate)
        return PopUpStrategy(sink=sink, fail_rate=self.fail_rate)


class PipelineConfig(BaseModel):
    """Everything needed to wire a notification pipeline."""
    observers: list[ObserverKind] = Field(
        default_factory=lambda: [ObserverKind.LOGGER, ObserverKind.ENGINE],
        description="Observers to subscribe, in notification order",
    )
    strategies: list[StrategyConfig] = Field(
        default_factory=list,
        description="Strategies to register on the engine, in delivery order",
    )
    signature: str = Field(default=DEFAULT_SIGNATURE)
    timestamp_format: str = Field(default=DEFAULT_TIMESTAMP_FORMAT)
    strategy_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds each strategy call may take (no limit if unset)",
    )
    fail_fast: bool = Field(
        default=True,
        description="Propagate observer errors instead of isolating them",
    )

    model_config = ConfigDict(extra="forbid")


def load_config(path: Optional[Path] = None) -> PipelineConfig:
    """
    Load a pipeline configuration from JSON.

    Args:
        path: Config file. Defaults to data/pipeline.json; if that file
              does not exist, the built-in defaults are used.

    Raises:
        ConfigError: If the file cannot be parsed or fails validation
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
        if not path.exists():
            return PipelineConfig()

    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
        return PipelineConfig.model_validate(data)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e


@dataclass
class Pipeline:
    """A wired service together with the observers it was built with."""
    service: NotificationService
    engine: NotificationEngine
    logger: NotificationLogger
    config: PipelineConfig
    clock: Optional[Clock] = None

    @property
    def observable(self) -> NotificationObservable:
        return self.service.observable

    def compose(self, text: str, decorators: Iterable[DecoratorKind] = ()) -> NotificationContent:
        """
        Build a notification, applying decorators innermost first.

        compose("Hi", ["signature", "timestamp"]) renders as
        "<timestamp> <signature> Hi".
        """
        content: NotificationContent = SimpleNotification(text)
        for kind in decorators:
            kind = DecoratorKind(kind)
            if kind == DecoratorKind.SIGNATURE:
                content = SignatureDecorator(content, signature=self.config.signature)
            else:
                content = TimeStampDecorator(content, clock=self.clock, fmt=self.config.timestamp_format)
        return content


def build_pipeline(
    config: Optional[PipelineConfig] = None,
    sink: Optional[Sink] = None,
    clock: Optional[Clock] = None,
) -> Pipeline:
    """
    Wire a NotificationService from configuration.

    The logger and engine are always created; only those listed in
    config.observers are subscribed, in that order.

    Args:
        config: Pipeline configuration (defaults apply if not provided)
        sink: Output for the logger and every strategy (logging if not provided)
        clock: Time source for timestamp decorators built by compose()
    """
    config = config or PipelineConfig()

    observable = NotificationObservable(fail_fast=config.fail_fast)
    service = NotificationService(observable=observable)

    notification_logger = NotificationLogger(observable, sink=sink)
    engine = NotificationEngine(
        observable,
        strategies=[s.build(sink=sink) for s in config.strategies],
        strategy_timeout=config.strategy_timeout,
    )

    observers = {
        ObserverKind.LOGGER: notification_logger,
        ObserverKind.ENGINE: engine,
    }
    for kind in config.observers:
        observable.subscribe(observers[kind])

    return Pipeline(
        service=service,
        engine=engine,
        logger=notification_logger,
        config=config,
        clock=clock,
    )
