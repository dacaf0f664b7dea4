"""State shared across a single smoke test run."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field

EXPECTED_TOTAL = 6


class WebhookWaitState(str, enum.Enum):
    """States of the webhook trigger wait. Every run starts in WAITING."""

    WAITING = "waiting"
    TRIGGERED = "triggered"
    TIMED_OUT = "timed_out"


@dataclass
class RunContext:
    """
    Counters and flags for one run.

    Attributes:
        webhook_triggered: Set by the webhook receiver thread, read by the poll step
        successes: Number of steps that met their success criterion
        expected_total: Number of steps in the scenario
        notification_id: ID of the notification method created this run ("" if none)
        alarm_definition_id: ID of the alarm definition created this run ("" if none)
        webhook_state: Where the webhook trigger wait stands
    """

    webhook_triggered: threading.Event = field(default_factory=threading.Event)
    successes: int = 0
    expected_total: int = EXPECTED_TOTAL
    notification_id: str = ""
    alarm_definition_id: str = ""
    webhook_state: WebhookWaitState = WebhookWaitState.WAITING

    def record_success(self) -> None:
        self.successes += 1

    @property
    def passed(self) -> bool:
        """Whether every step succeeded."""
        return self.successes == self.expected_total

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def summary(self) -> str:
        if self.passed:
            return "All smoke tests passed successfully!!!"
        return f"Smoke Tests Failed. {self.successes}/{self.expected_total} passed"
