"""Configuration management for the smoke test run."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5


class Settings(BaseSettings):
    """Smoke test settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Keystone (OpenStack identity) credentials
    os_auth_url: str = Field(default="", description="Keystone endpoint URL")
    os_username: str = Field(default="", description="Keystone user name")
    os_userid: str = Field(default="", description="Keystone user ID (alternative to name)")
    os_password: str = Field(default="", description="Keystone password")
    os_project_name: str = Field(default="", description="Project to scope the token to")
    os_project_id: str = Field(default="", description="Project ID to scope the token to")
    os_tenant_name: str = Field(default="", description="Legacy alias of os_project_name")
    os_tenant_id: str = Field(default="", description="Legacy alias of os_project_id")
    os_domain_name: str = Field(default="", description="Domain for user and project")
    os_domain_id: str = Field(default="", description="Domain ID for user and project")
    os_user_domain_name: str = Field(default="", description="Domain of the user")
    os_project_domain_name: str = Field(default="", description="Domain of the project")

    # Monasca API
    monasca_url: str = Field(default="", description="Monasca API base URL (required)")
    timeout: int = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        description="Monasca request timeout in seconds",
    )

    # Webhook receiver
    webhook_ip: str = Field(
        default="127.0.0.1",
        description="Address Monasca uses to reach the local webhook receiver",
    )
    webhook_port: int = Field(default=8080, description="Webhook receiver port")
    webhook_bind_host: str = Field(default="0.0.0.0", description="Webhook receiver bind host")
    webhook_poll_iterations: int = Field(
        default=60,
        description="Number of checks for the webhook before giving up",
    )
    webhook_poll_interval_seconds: float = Field(
        default=5.0,
        description="Sleep between webhook checks (60 x 5s = 5 minutes)",
    )

    # Measurement check
    measurement_metric_name: str = Field(
        default="pod.cpu.total_time_sec",
        description="Metric expected to be flowing into Monasca",
    )
    measurement_window_minutes: int = Field(
        default=3,
        description="Trailing window searched for measurements",
    )

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: object) -> int:
        """Fall back to the default timeout instead of failing on bad input."""
        if value is None or value == "":
            return DEFAULT_TIMEOUT_SECONDS
        try:
            timeout = int(value)
        except (TypeError, ValueError) as e:
            logger.warning(
                f"Error converting TIMEOUT {value!r} to int - {e}. "
                f"Defaulting timeout to {DEFAULT_TIMEOUT_SECONDS} seconds"
            )
            return DEFAULT_TIMEOUT_SECONDS
        if timeout <= 0:
            logger.warning(
                f"TIMEOUT must be positive, got {timeout}. "
                f"Defaulting timeout to {DEFAULT_TIMEOUT_SECONDS} seconds"
            )
            return DEFAULT_TIMEOUT_SECONDS
        return timeout

    @property
    def webhook_address(self) -> str:
        """URL advertised to Monasca for the notification method."""
        return f"http://{self.webhook_ip}:{self.webhook_port}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
