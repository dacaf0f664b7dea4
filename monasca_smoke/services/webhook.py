"""Local webhook receiver running alongside the smoke test."""

from __future__ import annotations

import logging
import threading
import time

import uvicorn

from monasca_smoke.api.routes import create_callback_app

logger = logging.getLogger(__name__)


class WebhookReceiver:
    """
    Serves the callback app with uvicorn on a daemon thread.

    The only state shared with the caller is the ``triggered`` event.
    """

    def __init__(
        self,
        triggered: threading.Event,
        host: str = "0.0.0.0",
        port: int = 8080,
    ):
        self.triggered = triggered
        self.host = host
        self.port = port
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None
        self._finished = threading.Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, wait_seconds: float = 5.0) -> WebhookReceiver:
        """
        Start serving in the background.

        Args:
            wait_seconds: How long to wait for the socket to be bound

        Raises:
            RuntimeError: If the server exited during startup or did not start in time
        """
        if self.running:
            return self

        config = uvicorn.Config(
            create_callback_app(self.triggered),
            host=self.host,
            port=self.port,
            log_level="warning",
            access_log=False,
        )
        self._server = uvicorn.Server(config)
        self._finished = threading.Event()
        self._thread = threading.Thread(
            target=self._serve,
            args=(self._server, self._finished),
            name="webhook-receiver",
            daemon=True,
        )
        self._thread.start()

        deadline = time.monotonic() + wait_seconds
        while not self._server.started:
            # Set as soon as uvicorn returns or exits, e.g. when the port is taken
            if self._finished.wait(timeout=0.05):
                self._reset()
                raise RuntimeError(f"Webhook receiver failed to start on {self.host}:{self.port}")
            if time.monotonic() > deadline:
                self.stop()
                raise RuntimeError(f"Webhook receiver did not start on {self.host}:{self.port} in time")

        logger.info(f"Webhook receiver listening on {self.host}:{self.port}")
        return self

    @staticmethod
    def _serve(server: uvicorn.Server, finished: threading.Event) -> None:
        """Thread target. uvicorn calls sys.exit when it cannot bind."""
        try:
            server.run()
        except SystemExit as e:
            logger.error(f"Webhook receiver exited during startup (code {e.code})")
        finally:
            finished.set()

    def _reset(self) -> None:
        if self._thread is not None:
            self._thread.join(timeout=1)
        self._server = None
        self._thread = None

    def stop(self, wait_seconds: float = 5.0) -> None:
        """Ask uvicorn to exit and wait for the thread to finish."""
        if self._server is None or self._thread is None:
            return

        self._server.should_exit = True
        self._thread.join(timeout=wait_seconds)
        if self._thread.is_alive():
            logger.warning("Webhook receiver thread did not stop in time")
        else:
            logger.info("Webhook receiver stopped")

        self._server = None
        self._thread = None
