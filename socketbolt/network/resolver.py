"""Obtain single-use Socket Mode connection URLs from the platform REST API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse

import requests

from socketbolt.errors import (
    EndpointAuthError,
    EndpointNetworkError,
    EndpointProtocolError,
    EndpointResolutionError,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_CONNECTIONS_OPEN_URL = "https://slack.com/api/apps.connections.open"

AUTH_ERROR_CODES = frozenset(
    {
        "invalid_auth",
        "not_authed",
        "account_inactive",
        "token_revoked",
        "token_expired",
        "not_allowed_token_type",
    }
)


class EndpointResolver:
    """Calls ``apps.connections.open`` and returns the WebSocket URL.

    Every call performs exactly one request; the returned URL is valid for a
    single connection attempt and is never cached here.
    """

    def __init__(
        self,
        *,
        url: str = DEFAULT_CONNECTIONS_OPEN_URL,
        timeout_seconds: float = 10,
    ) -> None:
        self._url = url
        self._timeout_seconds = timeout_seconds

    @property
    def url(self) -> str:
        return self._url

    def resolve(self, app_token: str) -> str:
        body = self._request(app_token)
        if not body.get("ok"):
            code = body.get("error") or "unknown_error"
            error_cls = EndpointAuthError if code in AUTH_ERROR_CODES else EndpointResolutionError
            raise error_cls(f"Failed to obtain WebSocket URL: {code}", code=code)
        url = body.get("url")
        if not isinstance(url, str) or not url:
            raise EndpointProtocolError("apps.connections.open returned no url", code="missing_url")
        LOGGER.debug("Obtained Socket Mode URL for host %s", _host_of(url))
        return url

    def _request(self, app_token: str) -> dict[str, Any]:
        try:
            response = requests.request(
                "POST",
                self._url,
                headers={
                    "Authorization": f"Bearer {app_token}",
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise EndpointNetworkError(str(exc), code="network_error") from exc
        try:
            body = response.json()
        except ValueError as exc:
            raise EndpointProtocolError(
                f"apps.connections.open returned invalid JSON (status {response.status_code})",
                code="invalid_json",
            ) from exc
        if not isinstance(body, dict):
            raise EndpointProtocolError("apps.connections.open returned a non-object body", code="invalid_body")
        return body


def _host_of(url: str) -> str:
    # the query string carries the connection ticket
    return urlparse(url).netloc or url.split("?", 1)[0]


__all__ = ["EndpointResolver", "DEFAULT_CONNECTIONS_OPEN_URL", "AUTH_ERROR_CODES"]
