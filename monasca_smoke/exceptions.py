"""Exceptions raised by the smoke test."""

from __future__ import annotations


class SmokeTestError(Exception):
    """Base class for smoke test errors."""


class ConfigError(SmokeTestError):
    """Required configuration is missing or invalid. Fatal."""


class AuthConfigError(ConfigError):
    """Identity credentials in the environment are missing or malformed. Fatal."""


class AuthFailure(SmokeTestError):
    """Keystone rejected the credentials or could not be reached. Fatal."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MonascaAPIError(SmokeTestError):
    """A Monasca API call failed. Fails only the current step."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
