"""HTTP client for the chat platform Web API."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import requests
from requests import Response

from socketbolt.config import BotSettings
from socketbolt.errors import ConfigurationError, WebApiError

LOGGER = logging.getLogger(__name__)


class WebClient:
    """Thin wrapper over the Web API methods handlers reach for most.

    Every method posts a JSON body with the bot token as bearer credential and
    returns the decoded response. Responses with ``ok: false`` raise
    :class:`WebApiError` carrying the platform error code.
    """

    def __init__(
        self,
        *,
        token: Optional[str],
        base_url: str = "https://slack.com/api",
        timeout_seconds: float = 10,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: BotSettings) -> WebClient:
        return cls(
            token=settings.bot_token,
            base_url=settings.api_base_url,
            timeout_seconds=settings.http_timeout_seconds,
        )

    def chat_post_message(self, *, channel: str, text: Optional[str] = None, **options: Any) -> dict[str, Any]:
        return self.api_call("chat.postMessage", channel=channel, text=text, **options)

    def chat_update(self, *, channel: str, ts: str, text: Optional[str] = None, **options: Any) -> dict[str, Any]:
        return self.api_call("chat.update", channel=channel, ts=ts, text=text, **options)

    def views_open(self, *, trigger_id: str, view: dict[str, Any]) -> dict[str, Any]:
        return self.api_call("views.open", trigger_id=trigger_id, view=view)

    def views_update(
        self,
        *,
        view: dict[str, Any],
        view_id: Optional[str] = None,
        external_id: Optional[str] = None,
        hash: Optional[str] = None,
    ) -> dict[str, Any]:
        return self.api_call("views.update", view=view, view_id=view_id, external_id=external_id, hash=hash)

    def views_push(self, *, trigger_id: str, view: dict[str, Any]) -> dict[str, Any]:
        return self.api_call("views.push", trigger_id=trigger_id, view=view)

    def api_call(self, method: str, **params: Any) -> dict[str, Any]:
        body = {key: value for key, value in params.items() if value is not None}
        response = self._request(method, body)
        try:
            payload = response.json()
        except ValueError as exc:
            raise WebApiError(method, "invalid_json") from exc
        if not isinstance(payload, dict):
            raise WebApiError(method, "invalid_body")
        if not payload.get("ok"):
            raise WebApiError(method, payload.get("error") or "unknown_error")
        LOGGER.debug("Web API %s succeeded", method)
        return payload

    def post_response_url(self, url: str, message: dict[str, Any]) -> Response:
        """Post a follow-up message to an interaction ``response_url``."""

        try:
            return requests.request(
                "POST",
                url,
                data=json.dumps(message),
                headers={"Content-Type": "application/json"},
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise WebApiError("response_url", "network_error") from exc

    def _request(self, method: str, body: dict[str, Any]) -> Response:
        if not self._token:
            raise ConfigurationError("bot_token is required for Web API calls")
        try:
            return requests.request(
                "POST",
                f"{self._base_url}/{method}",
                headers=self._build_headers(),
                json=body,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise WebApiError(method, "network_error") from exc

    def _build_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json; charset=utf-8",
        }
