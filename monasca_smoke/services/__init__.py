"""Clients and the smoke test runner."""

from monasca_smoke.services.keystone_client import KeystoneClient, credentials_from_settings
from monasca_smoke.services.monasca_client import MonascaClient
from monasca_smoke.services.smoke_runner import SmokeTestRunner
from monasca_smoke.services.webhook import WebhookReceiver

__all__ = [
    "KeystoneClient",
    "MonascaClient",
    "SmokeTestRunner",
    "WebhookReceiver",
    "credentials_from_settings",
]
