"""Pydantic schemas for Monasca and Keystone request/response bodies."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

# ============================================================================
# Enums
# ============================================================================


class NotificationType(str, Enum):
    """Notification method delivery types."""

    WEBHOOK = "WEBHOOK"


# ============================================================================
# Keystone Schemas
# ============================================================================


class KeystoneCredentials(BaseModel):
    """Credentials used to obtain a Keystone token."""

    auth_url: str = Field(..., description="Keystone endpoint URL")
    username: str = Field(default="", description="User name")
    user_id: str = Field(default="", description="User ID")
    password: str = Field(..., description="Password")
    project_name: str = Field(default="", description="Project name for scoping")
    project_id: str = Field(default="", description="Project ID for scoping")
    user_domain_name: str = Field(default="", description="Domain name of the user")
    user_domain_id: str = Field(default="", description="Domain ID of the user")
    project_domain_name: str = Field(default="", description="Domain name of the project")
    project_domain_id: str = Field(default="", description="Domain ID of the project")

    @property
    def is_v2(self) -> bool:
        """Whether the auth URL points at the legacy v2.0 identity API."""
        return self.auth_url.rstrip("/").endswith("/v2.0")


# ============================================================================
# Monasca Request Schemas
# ============================================================================


class NotificationMethodRequest(BaseModel):
    """Body for creating a notification method."""

    name: str = Field(..., description="Notification method name")
    type: NotificationType = Field(..., description="Delivery type")
    address: str = Field(..., description="Delivery address (URL for webhooks)")


class AlarmDefinitionRequest(BaseModel):
    """Body for creating an alarm definition."""

    name: str = Field(..., description="Alarm definition name")
    expression: str = Field(..., description="Alarm expression, e.g. cpu.idle_perc<10")
    alarm_actions: list[str] = Field(default_factory=list)
    undetermined_actions: list[str] = Field(default_factory=list)
    ok_actions: list[str] = Field(default_factory=list)


class MetricRequest(BaseModel):
    """Body for posting a single metric point."""

    name: str = Field(..., description="Metric name")
    value: float = Field(..., description="Metric value")
    timestamp: int = Field(..., description="Epoch time in milliseconds")


class MeasurementQuery(BaseModel):
    """Query parameters for the measurements endpoint."""

    name: str
    start_time: datetime
    group_by: str | None = None

    def to_params(self) -> dict[str, str]:
        """Render as Monasca query string parameters."""
        params = {
            "name": self.name,
            "start_time": _isoformat(self.start_time),
        }
        if self.group_by:
            params["group_by"] = self.group_by
        return params


def _isoformat(value: datetime) -> str:
    """Monasca expects UTC ISO 8601 timestamps with a trailing Z."""
    return value.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


# ============================================================================
# Monasca Response Schemas
# ============================================================================


class Link(BaseModel):
    """Pagination or self link."""

    rel: str
    href: str


class Element(BaseModel):
    """A single resource returned by Monasca."""

    id: str = ""
    name: str = ""
    links: list[Link] = Field(default_factory=list)

    model_config = {"extra": "allow"}


class ElementList(BaseModel):
    """Paginated list envelope used by Monasca list endpoints."""

    elements: list[Element] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)

    @property
    def next_href(self) -> str | None:
        """URL of the next page, if any."""
        for link in self.links:
            if link.rel == "next":
                return link.href
        return None

    def ids_named(self, name: str) -> list[str]:
        """IDs of every element with the given name."""
        return [element.id for element in self.elements if element.name == name and element.id]
