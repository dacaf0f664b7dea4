"""Keystone client for obtaining an authentication token."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

import httpx

from monasca_smoke.api.schemas import KeystoneCredentials
from monasca_smoke.config import Settings
from monasca_smoke.exceptions import AuthConfigError, AuthFailure

logger = logging.getLogger(__name__)


def credentials_from_settings(settings: Settings) -> KeystoneCredentials:
    """
    Build Keystone credentials from the OS_* environment settings.

    Raises:
        AuthConfigError: If the auth URL, user or password is missing or malformed
    """
    if not settings.os_auth_url:
        raise AuthConfigError("OS_AUTH_URL environment variable must be set")

    parsed = urlparse(settings.os_auth_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise AuthConfigError(f"OS_AUTH_URL is not a valid http(s) URL: {settings.os_auth_url!r}")

    if not settings.os_username and not settings.os_userid:
        raise AuthConfigError("OS_USERNAME or OS_USERID environment variable must be set")

    if not settings.os_password:
        raise AuthConfigError("OS_PASSWORD environment variable must be set")

    domain_name = settings.os_domain_name
    domain_id = settings.os_domain_id

    return KeystoneCredentials(
        auth_url=settings.os_auth_url,
        username=settings.os_username,
        user_id=settings.os_userid,
        password=settings.os_password,
        project_name=settings.os_project_name or settings.os_tenant_name,
        project_id=settings.os_project_id or settings.os_tenant_id,
        user_domain_name=settings.os_user_domain_name or domain_name,
        user_domain_id=domain_id,
        project_domain_name=settings.os_project_domain_name or domain_name,
        project_domain_id=domain_id,
    )


class KeystoneClient:
    """
    Async client for the Keystone identity API.

    Supports password authentication against v3 (default) and the legacy
    v2.0 API when the auth URL ends in /v2.0.
    """

    def __init__(
        self,
        credentials: KeystoneCredentials,
        timeout: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the Keystone client.

        Args:
            credentials: Credentials to authenticate with
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.credentials = credentials
        self.timeout = timeout
        self._transport = transport

    async def get_token(self) -> str:
        """
        Authenticate and return the token ID.

        Raises:
            AuthFailure: If Keystone rejects the request or is unreachable
        """
        if self.credentials.is_v2:
            url, body = self._v2_request()
        else:
            url, body = self._v3_request()

        logger.debug(f"Requesting Keystone token from {url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=body)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AuthFailure(
                f"Keystone returned {e.response.status_code}: {e.response.text}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise AuthFailure(f"Unable to reach Keystone at {url}: {e}") from e

        token = self._extract_token(response)
        if not token:
            raise AuthFailure("Keystone response did not contain a token")

        logger.info("Obtained Keystone token")
        return token

    def _extract_token(self, response: httpx.Response) -> str:
        if not self.credentials.is_v2:
            return response.headers.get("X-Subject-Token", "")
        try:
            return response.json()["access"]["token"]["id"]
        except (ValueError, KeyError, TypeError):
            return ""

    def _v3_request(self) -> tuple[str, dict]:
        creds = self.credentials
        base = creds.auth_url.rstrip("/")
        if not base.endswith("/v3"):
            base = f"{base}/v3"

        user: dict = {"password": creds.password}
        if creds.user_id:
            user["id"] = creds.user_id
        else:
            user["name"] = creds.username
            user["domain"] = _domain(creds.user_domain_name, creds.user_domain_id)

        body: dict = {
            "auth": {
                "identity": {
                    "methods": ["password"],
                    "password": {"user": user},
                }
            }
        }

        if creds.project_id:
            body["auth"]["scope"] = {"project": {"id": creds.project_id}}
        elif creds.project_name:
            body["auth"]["scope"] = {
                "project": {
                    "name": creds.project_name,
                    "domain": _domain(creds.project_domain_name, creds.project_domain_id),
                }
            }

        return f"{base}/auth/tokens", body

    def _v2_request(self) -> tuple[str, dict]:
        creds = self.credentials
        auth: dict = {
            "passwordCredentials": {
                "username": creds.username or creds.user_id,
                "password": creds.password,
            }
        }
        if creds.project_id:
            auth["tenantId"] = creds.project_id
        elif creds.project_name:
            auth["tenantName"] = creds.project_name

        return f"{creds.auth_url.rstrip('/')}/tokens", {"auth": auth}


def _domain(name: str, domain_id: str) -> dict:
    """Domain reference, falling back to the default domain."""
    if domain_id:
        return {"id": domain_id}
    return {"name": name or "Default"}
