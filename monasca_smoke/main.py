"""Command line entrypoint for the Monasca smoke test."""

from __future__ import annotations

import asyncio
import logging
import sys

import httpx
from pydantic import ValidationError

from monasca_smoke import __version__
from monasca_smoke.config import Settings, get_settings
from monasca_smoke.exceptions import AuthFailure, ConfigError
from monasca_smoke.models import RunContext
from monasca_smoke.services import (
    KeystoneClient,
    MonascaClient,
    SmokeTestRunner,
    WebhookReceiver,
    credentials_from_settings,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))
    # Per-request lines from httpx are noise in the console report
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def run_smoke_tests(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """
    Authenticate, start the webhook receiver and run the scenario.

    Args:
        settings: Run configuration
        transport: Optional httpx transport for both API clients (used by tests)

    Returns:
        int: Process exit status

    Raises:
        AuthConfigError: If identity credentials are missing or malformed
        ConfigError: If MONASCA_URL is not set
        AuthFailure: If no Keystone token could be obtained
    """
    credentials = credentials_from_settings(settings)

    if not settings.monasca_url:
        raise ConfigError("MONASCA_URL environment variable must be set")

    token = await KeystoneClient(credentials, transport=transport).get_token()

    client = MonascaClient(
        settings.monasca_url,
        token,
        timeout=settings.timeout,
        transport=transport,
    )
    logger.info(f"Monasca client configured for {client.base_url} (timeout {settings.timeout}s)")

    context = RunContext()
    receiver = WebhookReceiver(
        context.webhook_triggered,
        host=settings.webhook_bind_host,
        port=settings.webhook_port,
    )
    try:
        await asyncio.to_thread(receiver.start)
    except RuntimeError as e:
        # The webhook step will time out and fail the run
        logger.error(f"{e}")

    try:
        await SmokeTestRunner(client, context, settings).run()
    finally:
        await asyncio.to_thread(receiver.stop)

    return context.exit_code


def main() -> int:
    configure_logging()
    logger.info(f"Monasca smoke test v{__version__}")

    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration - {e}")
        return 1

    configure_logging(settings.log_level)

    try:
        return asyncio.run(run_smoke_tests(settings))
    except ConfigError as e:
        logger.error(f"ERROR setting up smoke test - {e}")
        return 1
    except AuthFailure as e:
        logger.error(f"ERROR getting keystone token - {e}")
        return 1


def run() -> None:
    """Run the smoke test and exit with its status."""
    sys.exit(main())


if __name__ == "__main__":
    run()
