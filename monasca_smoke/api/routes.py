"""Callback endpoint that Monasca invokes when the smoke test alarm fires."""

from __future__ import annotations

import logging
import threading

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)

ACKNOWLEDGEMENT = "Received WEBHOOK"

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def create_callback_app(triggered: threading.Event) -> FastAPI:
    """
    Build the callback application.

    Any method on any path acknowledges the call and sets ``triggered``.
    The payload is not inspected.
    """
    callback_router = APIRouter(tags=["webhooks"])

    @callback_router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def receive_webhook(request: Request) -> PlainTextResponse:
        logger.info(f"Webhook received: {request.method} {request.url.path}")
        triggered.set()
        return PlainTextResponse(ACKNOWLEDGEMENT)

    app = FastAPI(
        title="Monasca Smoke Test Webhook Receiver",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.include_router(callback_router)
    return app
