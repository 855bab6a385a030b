"""Per-event context handed to middleware and handlers."""

from __future__ import annotations

from typing import Any, Callable, Optional, Union

from .web.client import WebClient

AckFn = Callable[[Optional[Any]], None]
Message = Union[str, dict[str, Any]]


def _noop_ack(response: Optional[Any] = None) -> None:
    return None


def _extract_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, dict):
        return value.get("id")
    return value


def _as_options(message: Message) -> dict[str, Any]:
    if isinstance(message, dict):
        return dict(message)
    return {"text": message}


class Context:
    """Wraps one inbound payload together with the Web API client.

    ``user`` and ``channel`` accept every payload shape the platform sends:
    ``event.user`` for Events API callbacks, ``user_id`` for slash commands
    and ``user.id`` for interactive payloads (same for channels).
    """

    def __init__(
        self,
        *,
        payload: dict[str, Any],
        client: WebClient,
        ack: Optional[AckFn] = None,
    ) -> None:
        self.payload = payload
        self.client = client
        self._ack_fn = ack or _noop_ack
        self._acked = False

    @property
    def event(self) -> Optional[dict[str, Any]]:
        return self.payload.get("event")

    @property
    def user(self) -> Optional[str]:
        event = self.event or {}
        return _extract_id(event.get("user") or self.payload.get("user_id") or self.payload.get("user"))

    @property
    def channel(self) -> Optional[str]:
        event = self.event or {}
        return _extract_id(event.get("channel") or self.payload.get("channel_id") or self.payload.get("channel"))

    @property
    def text(self) -> Optional[str]:
        event = self.event
        if event is None:
            return None
        return event.get("text")

    @property
    def acked(self) -> bool:
        return self._acked

    def ack(self, response: Optional[Any] = None) -> None:
        self._ack_fn(response)
        self._acked = True

    def say(self, message: Message) -> dict[str, Any]:
        """Post ``message`` to the channel the payload came from."""

        options = _as_options(message)
        options["channel"] = self.channel
        return self.client.chat_post_message(**options)

    def respond(self, message: Message) -> Any:
        """Post ``message`` to the payload's ``response_url``, if it has one."""

        response_url = self.payload.get("response_url")
        if not response_url:
            return None
        return self.client.post_response_url(response_url, _as_options(message))


__all__ = ["AckFn", "Context", "Message"]
