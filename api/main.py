"""
FastAPI application for the notification pipeline.

This application provides:
1. POST /notify to compose and send a notification
2. GET /history and GET /current to read what was sent
3. GET /strategies to see where notifications are delivered

The pipeline is built from data/pipeline.json on first use.

Run with:
    uv run uvicorn api.main:app --reload

Then visit http://localhost:8000/docs for interactive API documentation.
"""

import logging
import threading
from contextlib import asynccontextmanager
from typing import Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException

from api.models import (
    DeliveryOutcome,
    HistoryResponse,
    NotificationRequest,
    NotificationResponse,
    StrategyInfo,
)
from notifier.config import Pipeline, build_pipeline, load_config
from notifier.errors import ConfigError, NoNotificationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("notification_api")

# Module-level pipeline (replace with reset_api_state in tests)
_pipeline: Optional[Pipeline] = None
_lock = threading.Lock()


def get_pipeline() -> Pipeline:
    """Get the pipeline, building it from configuration on first use."""
    global _pipeline
    if _pipeline is None:
        _pipeline = build_pipeline(load_config())
    return _pipeline


def reset_api_state(pipeline: Optional[Pipeline] = None) -> None:
    """Reset API state (for testing)."""
    global _pipeline
    _pipeline = pipeline


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logging.info("Starting Notification Pipeline API")
    try:
        get_pipeline()
    except ConfigError as e:
        logging.error(f"Pipeline configuration failed: {e}")
        raise
    yield
    logging.info("Shutting down")


app = FastAPI(
    title="Notification Pipeline",
    description="""
    Compose notifications, broadcast them to observers and deliver them
    through every configured channel.

    ## Endpoints

    - `/notify` - Compose and send a notification
    - `/history` - Notifications sent so far
    - `/current` - The most recent notification
    - `/strategies` - Configured delivery strategies
    """,
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "notification-pipeline"}


@app.post("/notify", response_model=NotificationResponse, tags=["Notifications"])
def send_notification(
    request: NotificationRequest,
    pipeline: Pipeline = Depends(get_pipeline),
) -> NotificationResponse:
    """
    Compose a notification and run the full cascade.

    Returns once every observer and delivery strategy has run.
    """
    request_id = str(uuid4())
    logger.info(f"Notification request {request_id}: decorators={[d.value for d in request.decorators]}")

    notification = pipeline.compose(request.text, request.decorators)

    with _lock:
        pipeline.engine.last_results = []
        try:
            failures = pipeline.service.send_notification(notification)
        except Exception as e:
            logger.error(f"Notification {request_id} failed: {e}")
            raise HTTPException(status_code=500, detail=f"Notification failed: {e}") from e
        results = pipeline.engine.last_results

    # Render what the strategies received; timestamps would differ on re-render
    content = results[0].body if results else notification.get_content()

    return NotificationResponse(
        request_id=request_id,
        content=content,
        deliveries=[
            DeliveryOutcome(
                channel=r.channel,
                recipient=r.recipient,
                success=r.success,
                error=r.error,
                timed_out=r.timed_out,
            )
            for r in results
        ],
        observer_failures=[str(f) for f in failures],
        history_count=pipeline.service.get_history_count(),
    )


@app.get("/history", response_model=HistoryResponse, tags=["Notifications"])
def get_history(pipeline: Pipeline = Depends(get_pipeline)) -> HistoryResponse:
    """Get all notifications sent so far."""
    history = pipeline.service.get_history()
    return HistoryResponse(
        count=len(history),
        notifications=[n.get_content() for n in history],
    )


@app.get("/current", tags=["Notifications"])
def get_current(pipeline: Pipeline = Depends(get_pipeline)):
    """Get the current notification."""
    try:
        content = pipeline.observable.get_notification_content()
    except NoNotificationError:
        raise HTTPException(status_code=404, detail="No notification has been sent yet")
    return {"state": pipeline.observable.state.value, "content": content}


@app.get("/strategies", response_model=list[StrategyInfo], tags=["Delivery"])
def get_strategies(pipeline: Pipeline = Depends(get_pipeline)) -> list[StrategyInfo]:
    """Get the delivery strategies, in delivery order."""
    return [
        StrategyInfo(
            channel=s.channel.value,
            recipient=getattr(s, "recipient", None),
        )
        for s in pipeline.engine.strategies
    ]
