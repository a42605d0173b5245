"""
HTTP API for the notification pipeline.

This package provides a single FastAPI application that exposes:
- Sending composed notifications through the pipeline
- Reading notification history and the current notification
- Listing the configured delivery strategies
"""

from api.main import app

__all__ = ["app"]
