"""Monasca client for the metrics, alarm-definition and notification APIs."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from monasca_smoke.api.schemas import (
    AlarmDefinitionRequest,
    Element,
    ElementList,
    MeasurementQuery,
    MetricRequest,
    NotificationMethodRequest,
)
from monasca_smoke.exceptions import MonascaAPIError

logger = logging.getLogger(__name__)

API_VERSION = "v2.0"


class MonascaClient:
    """
    Async client for the Monasca v2.0 API.

    Base URL, timeout and the X-Auth-Token header are fixed at construction
    and shared by every request the client makes.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: int = 5,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the Monasca client.

        Args:
            base_url: Monasca API URL, with or without the /v2.0 suffix
            token: Keystone token sent on every request
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        base_url = base_url.rstrip("/")
        if base_url.endswith(f"/{API_VERSION}"):
            base_url = base_url[: -len(API_VERSION) - 1]
        self.base_url = base_url
        self.timeout = timeout
        self.headers = {"X-Auth-Token": token, "Accept": "application/json"}
        self._transport = transport

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{API_VERSION}/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Send a single request. No retries.

        Raises:
            MonascaAPIError: On HTTP error status or transport failure
        """
        logger.debug(f"{method} {url} params={params}")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.headers,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, params=params, json=json)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise MonascaAPIError(
                f"{method} {e.request.url.path} returned {e.response.status_code}: {e.response.text}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise MonascaAPIError(f"{method} {url} failed: {e}") from e

        return response

    @staticmethod
    def _parse(response: httpx.Response, model: type[Element] | type[ElementList]):
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise MonascaAPIError(
                f"Unexpected response from {response.request.url.path}: {e}",
                status_code=response.status_code,
            ) from e

    async def _list(self, path: str, params: dict[str, Any] | None = None) -> ElementList:
        """Fetch every page of a list endpoint, following 'next' links."""
        response = await self._request("GET", self._url(path), params=params)
        page = self._parse(response, ElementList)
        elements = list(page.elements)

        while page.next_href:
            response = await self._request("GET", page.next_href)
            page = self._parse(response, ElementList)
            elements.extend(page.elements)

        return ElementList(elements=elements)

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    async def create_metric(self, metric: MetricRequest) -> None:
        """Post a single metric point."""
        await self._request("POST", self._url("metrics"), json=metric.model_dump(mode="json"))

    async def get_measurements(self, query: MeasurementQuery) -> ElementList:
        """
        Query measurements.

        Returns:
            ElementList: One element per series in the time range
        """
        response = await self._request(
            "GET",
            self._url("metrics/measurements"),
            params=query.to_params(),
        )
        result = self._parse(response, ElementList)
        logger.debug(f"Measurement query returned {len(result.elements)} elements")
        return result

    # ------------------------------------------------------------------
    # Notification methods
    # ------------------------------------------------------------------

    async def create_notification_method(self, body: NotificationMethodRequest) -> Element:
        response = await self._request(
            "POST", self._url("notification-methods"), json=body.model_dump(mode="json")
        )
        return self._parse(response, Element)

    async def get_notification_methods(self) -> ElementList:
        """List all notification methods (the API has no name filter)."""
        return await self._list("notification-methods")

    async def delete_notification_method(self, notification_id: str) -> None:
        await self._request("DELETE", self._url(f"notification-methods/{notification_id}"))

    # ------------------------------------------------------------------
    # Alarm definitions
    # ------------------------------------------------------------------

    async def create_alarm_definition(self, body: AlarmDefinitionRequest) -> Element:
        response = await self._request(
            "POST", self._url("alarm-definitions"), json=body.model_dump(mode="json")
        )
        return self._parse(response, Element)

    async def get_alarm_definitions(self, name: str | None = None) -> ElementList:
        """List alarm definitions, optionally filtered by name."""
        params = {"name": name} if name else None
        return await self._list("alarm-definitions", params=params)

    async def delete_alarm_definition(self, alarm_definition_id: str) -> None:
        await self._request("DELETE", self._url(f"alarm-definitions/{alarm_definition_id}"))
