"""Handlers for modal submissions and closes."""

from __future__ import annotations

import re
from typing import Any, ClassVar, Optional, Union

from .base import Handler, match_value


class _ViewHandler(Handler):
    payload_type: ClassVar[str] = ""
    callback_id: ClassVar[Optional[Union[str, "re.Pattern[str]"]]] = None

    @classmethod
    def matches(cls, payload: dict[str, Any]) -> bool:
        if cls.callback_id is None or payload.get("type") != cls.payload_type:
            return False
        view = payload.get("view") or {}
        return match_value(cls.callback_id, view.get("callback_id"))

    @property
    def view(self) -> Optional[dict[str, Any]]:
        return self.payload.get("view")

    @property
    def received_callback_id(self) -> Optional[str]:
        return (self.view or {}).get("callback_id")

    @property
    def private_metadata(self) -> Optional[str]:
        return (self.view or {}).get("private_metadata")

    @property
    def user_id(self) -> Optional[str]:
        return (self.payload.get("user") or {}).get("id")


class ViewSubmissionHandler(_ViewHandler):
    """Handles ``view_submission`` payloads.

    ``values`` is keyed by block id, then action id::

        title = self.values["title_block"]["title_input"]["value"]

    Validation errors are returned through ``ack``::

        self.ack({"response_action": "errors", "errors": {"title_block": "Required"}})
    """

    payload_type = "view_submission"

    @property
    def values(self) -> dict[str, Any]:
        state = (self.view or {}).get("state") or {}
        return state.get("values") or {}

    @property
    def response_urls(self) -> list[dict[str, Any]]:
        return self.payload.get("response_urls") or []

    @property
    def view_hash(self) -> Optional[str]:
        return (self.view or {}).get("hash")


class ViewClosedHandler(_ViewHandler):
    """Handles ``view_closed`` payloads (modals opened with ``notify_on_close``)."""

    payload_type = "view_closed"

    @property
    def is_cleared(self) -> bool:
        return self.payload.get("is_cleared") is True
