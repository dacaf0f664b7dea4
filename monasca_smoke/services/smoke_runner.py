"""The smoke test scenario: pre-run cleanup, test steps and final cleanup."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import UTC, datetime, timedelta

from monasca_smoke.api.schemas import (
    AlarmDefinitionRequest,
    MeasurementQuery,
    MetricRequest,
    NotificationMethodRequest,
    NotificationType,
)
from monasca_smoke.config import Settings
from monasca_smoke.exceptions import MonascaAPIError
from monasca_smoke.models import RunContext, WebhookWaitState
from monasca_smoke.services.monasca_client import MonascaClient

logger = logging.getLogger(__name__)

NOTIFICATION_NAME = "smoke_test_notification"
ALARM_DEFINITION_NAME = "smoke_test_alarm"
SMOKE_METRIC_NAME = "smoke_test_metric"
ALARM_EXPRESSION = f"{SMOKE_METRIC_NAME}>0"


def report(message: str = "") -> None:
    """Write a progress line to the console report."""
    print(message, flush=True)


class SmokeTestRunner:
    """
    Runs the fixed smoke test scenario against Monasca.

    Every step catches its own MonascaAPIError, reports it and returns, so a
    failing step never stops the steps after it.
    """

    def __init__(self, client: MonascaClient, context: RunContext, settings: Settings):
        self.client = client
        self.context = context
        self.settings = settings

    async def run(self) -> RunContext:
        """Run cleanup and all six steps in order."""
        await self.cleanup_previous_run()

        report("TEST MEASUREMENTS FLOWING")
        await self.test_measurements_flowing()
        report()

        report("TEST NOTIFICATION CREATION")
        self.context.notification_id = await self.test_create_notification(
            self.settings.webhook_address
        )
        report()

        report("TEST ALARM DEFINITION CREATION")
        self.context.alarm_definition_id = await self.test_create_alarm_definition(
            self.context.notification_id
        )
        report()

        report("TEST METRIC CREATION")
        await self.test_create_metric(1)
        report()

        report("TEST WEBHOOK TRIGGERED")
        await self.test_webhook_trigger()
        report()

        report("TEST CLEANUP")
        await self.cleanup(self.context.alarm_definition_id, self.context.notification_id)
        report()

        report(self.context.summary())
        return self.context

    # ------------------------------------------------------------------
    # Pre-run cleanup
    # ------------------------------------------------------------------

    async def cleanup_previous_run(self) -> None:
        """Delete fixtures left over from an earlier, interrupted run."""
        try:
            notifications = await self.client.get_notification_methods()
        except MonascaAPIError as e:
            logger.warning(
                "Error getting notification methods to delete potential left over "
                f"notification method from previous runs - {e}"
            )
        else:
            for notification_id in notifications.ids_named(NOTIFICATION_NAME):
                try:
                    await self.client.delete_notification_method(notification_id)
                    logger.info(f"Deleted left over notification method {notification_id}")
                except MonascaAPIError as e:
                    logger.warning(f"Error deleting notification method - {e}")

        try:
            alarm_definitions = await self.client.get_alarm_definitions(name=ALARM_DEFINITION_NAME)
        except MonascaAPIError as e:
            logger.warning(
                "Error getting alarm definitions to delete potential left over "
                f"alarm definition from previous runs - {e}"
            )
        else:
            for alarm_definition_id in alarm_definitions.ids_named(ALARM_DEFINITION_NAME):
                try:
                    await self.client.delete_alarm_definition(alarm_definition_id)
                    logger.info(f"Deleted left over alarm definition {alarm_definition_id}")
                except MonascaAPIError as e:
                    logger.warning(f"Error deleting alarm definition - {e}")

    # ------------------------------------------------------------------
    # Test steps
    # ------------------------------------------------------------------

    async def test_measurements_flowing(self) -> bool:
        metric_name = self.settings.measurement_metric_name
        start_time = datetime.now(UTC) - timedelta(minutes=self.settings.measurement_window_minutes)
        query = MeasurementQuery(name=metric_name, start_time=start_time, group_by="*")

        try:
            measurements = await self.client.get_measurements(query)
        except MonascaAPIError as e:
            report(f"FAILED - Error getting measurements from API test failed {e}")
            return False

        if not measurements.elements:
            report(f"FAILED - No current measurements found for {metric_name}")
            return False

        report("SUCCESS")
        self.context.record_success()
        return True

    async def test_create_notification(self, webhook_address: str) -> str:
        """Create the webhook notification method. Returns its ID, or "" on failure."""
        body = NotificationMethodRequest(
            name=NOTIFICATION_NAME,
            type=NotificationType.WEBHOOK,
            address=webhook_address,
        )
        try:
            notification = await self.client.create_notification_method(body)
        except MonascaAPIError as e:
            report(f"FAILED - Error creating notification method {e}")
            return ""

        report("SUCCESS")
        self.context.record_success()
        return notification.id

    async def test_create_alarm_definition(self, notification_id: str) -> str:
        """
        Create the alarm definition wired to ``notification_id`` for every
        state transition. Returns its ID, or "" on failure.
        """
        actions = [notification_id]
        body = AlarmDefinitionRequest(
            name=ALARM_DEFINITION_NAME,
            expression=ALARM_EXPRESSION,
            alarm_actions=actions,
            undetermined_actions=actions,
            ok_actions=actions,
        )
        try:
            alarm_definition = await self.client.create_alarm_definition(body)
        except MonascaAPIError as e:
            report(f"FAILED - Error creating alarm definition {e}")
            return ""

        report("SUCCESS")
        self.context.record_success()
        return alarm_definition.id

    async def test_create_metric(self, value: float) -> bool:
        metric = MetricRequest(
            name=SMOKE_METRIC_NAME,
            value=value,
            timestamp=round(time.time() * 1000),
        )
        try:
            await self.client.create_metric(metric)
        except MonascaAPIError as e:
            report(f"FAILED - Error creating metric {e}")
            return False

        report("SUCCESS")
        self.context.record_success()
        return True

    async def test_webhook_trigger(self) -> WebhookWaitState:
        """Poll the trigger flag until it is set or the iterations run out."""
        iterations = self.settings.webhook_poll_iterations
        interval = self.settings.webhook_poll_interval_seconds

        for _ in range(iterations):
            if self.context.webhook_triggered.is_set():
                report("SUCCESS")
                self.context.record_success()
                self.context.webhook_state = WebhookWaitState.TRIGGERED
                return self.context.webhook_state
            await asyncio.sleep(interval)

        report("FAILED - Did not receive webhook")
        self.context.webhook_state = WebhookWaitState.TIMED_OUT
        return self.context.webhook_state

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    async def cleanup(self, alarm_definition_id: str, notification_id: str) -> bool:
        cleanup_ok = True

        if alarm_definition_id:
            try:
                await self.client.delete_alarm_definition(alarm_definition_id)
            except MonascaAPIError as e:
                report(f"FAILED - Error deleting alarm definition - {e}")
                cleanup_ok = False

        if notification_id:
            try:
                await self.client.delete_notification_method(notification_id)
            except MonascaAPIError as e:
                report(f"FAILED - Error deleting notification method - {e}")
                cleanup_ok = False

        if cleanup_ok:
            report("SUCCESS")
            self.context.record_success()
        return cleanup_ok
