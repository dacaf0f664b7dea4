"""Unit tests for the webhook callback receiver."""

from __future__ import annotations

import threading
import time

import httpx
import pytest

from monasca_smoke.api.routes import ACKNOWLEDGEMENT, create_callback_app
from monasca_smoke.services.webhook import WebhookReceiver


class TestCallbackApp:
    """Any request acknowledges and sets the trigger flag."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("method", "path"),
        [("POST", "/"), ("GET", "/"), ("PUT", "/alarms/smoke"), ("POST", "/a/b/c?x=1")],
    )
    async def test_any_method_and_path(self, method, path):
        triggered = threading.Event()
        transport = httpx.ASGITransport(app=create_callback_app(triggered))

        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.request(method, path, json={"state": "ALARM"})

        assert response.status_code == 200
        assert response.text == ACKNOWLEDGEMENT
        assert triggered.is_set()

    @pytest.mark.asyncio
    async def test_not_set_before_any_request(self):
        triggered = threading.Event()
        create_callback_app(triggered)

        assert not triggered.is_set()

    @pytest.mark.asyncio
    async def test_repeated_calls_are_idempotent(self):
        triggered = threading.Event()
        transport = httpx.ASGITransport(app=create_callback_app(triggered))

        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            first = await client.post("/")
            second = await client.post("/")

        assert first.status_code == second.status_code == 200
        assert triggered.is_set()


class TestWebhookReceiver:
    """The receiver runs on its own thread and can be stopped."""

    def test_start_receive_stop(self, free_port):
        triggered = threading.Event()
        receiver = WebhookReceiver(triggered, host="127.0.0.1", port=free_port).start()
        try:
            assert receiver.running
            response = httpx.post(f"http://127.0.0.1:{free_port}/", json={"state": "ALARM"}, timeout=5)

            assert response.text == ACKNOWLEDGEMENT
            assert triggered.wait(timeout=5)
        finally:
            receiver.stop()

        assert not receiver.running

    def test_port_released_after_stop(self, free_port):
        first = WebhookReceiver(threading.Event(), host="127.0.0.1", port=free_port).start()
        first.stop()

        second = WebhookReceiver(threading.Event(), host="127.0.0.1", port=free_port).start()
        try:
            assert second.running
        finally:
            second.stop()

    def test_stop_without_start_is_noop(self):
        receiver = WebhookReceiver(threading.Event(), port=0)

        receiver.stop()

        assert not receiver.running

    @pytest.mark.filterwarnings("error::pytest.PytestUnhandledThreadExceptionWarning")
    def test_busy_port_fails_fast(self, occupied_port):
        """
        Given the port is already bound by another socket,
        When the receiver starts,
        Then it raises promptly and its thread exits without leaking SystemExit.
        """
        receiver = WebhookReceiver(threading.Event(), host="127.0.0.1", port=occupied_port)

        started = time.monotonic()
        with pytest.raises(RuntimeError, match="failed to start"):
            receiver.start(wait_seconds=30)

        assert time.monotonic() - started < 10
        assert not receiver.running
