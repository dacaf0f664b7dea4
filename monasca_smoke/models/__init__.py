"""Run state for the smoke test."""

from monasca_smoke.models.run_context import EXPECTED_TOTAL, RunContext, WebhookWaitState

__all__ = [
    "EXPECTED_TOTAL",
    "RunContext",
    "WebhookWaitState",
]
