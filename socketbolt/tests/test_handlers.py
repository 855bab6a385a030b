import re

import pytest

from socketbolt.handlers import (
    ActionHandler,
    CommandHandler,
    EventHandler,
    Handler,
    ShortcutHandler,
    ViewClosedHandler,
    ViewSubmissionHandler,
)
from socketbolt.middleware import Middleware
from socketbolt.testing import FakeWebClient, PayloadFactory, build_context


class MessageHandler(EventHandler):
    event_type = "message"

    def handle(self):
        self.say(f"echo: {self.text}")


class HelloHandler(EventHandler):
    event_type = "message"
    pattern = re.compile(r"hello", re.IGNORECASE)

    def handle(self):
        pass


class DeployHandler(CommandHandler):
    command = "/deploy"

    def handle(self):
        self.ack()
        self.say(f"Deploying {self.command_text}")


class ApproveHandler(ActionHandler):
    action_id = "approve_button"

    def handle(self):
        self.ack()


class ScopedApproveHandler(ActionHandler):
    action_id = "approve_button"
    block_id = "approval_block"


class RequestHandler(ActionHandler):
    action_id = re.compile(r"^approve_request_")


class TicketShortcut(ShortcutHandler):
    callback_id = "create_ticket"


class CreateShortcut(ShortcutHandler):
    callback_id = re.compile(r"^create_")


class TicketSubmit(ViewSubmissionHandler):
    callback_id = "ticket_modal"


class WizardClosed(ViewClosedHandler):
    callback_id = re.compile(r"^wizard_step_")


def test_base_handler_matches_nothing_and_requires_handle():
    assert not Handler.matches(PayloadFactory.message("hi"))
    with pytest.raises(NotImplementedError):
        Handler(build_context({})).call()


def test_unconfigured_subclasses_match_nothing():
    assert not EventHandler.matches(PayloadFactory.message("hi"))
    assert not CommandHandler.matches(PayloadFactory.command("/deploy"))
    assert not ActionHandler.matches(PayloadFactory.action("approve_button"))


def test_event_handler_matches_type_and_pattern():
    assert MessageHandler.matches(PayloadFactory.message("anything"))
    assert not MessageHandler.matches(PayloadFactory.app_mention("<@B1> hi"))
    assert HelloHandler.matches(PayloadFactory.message("well HELLO there"))
    assert not HelloHandler.matches(PayloadFactory.message("goodbye"))
    assert not HelloHandler.matches({"event": {"type": "message"}})


def test_event_handler_accessors_and_say():
    client = FakeWebClient()
    payload = PayloadFactory.message("ping", channel="C1", ts="1.1", thread_ts="0.9")
    handler = MessageHandler(build_context(payload, client=client))

    handler.call()

    assert handler.ts == "1.1"
    assert handler.thread_ts == "0.9"
    assert client.calls_to("chat.postMessage") == [{"channel": "C1", "text": "echo: ping"}]


def test_command_handler_accessors():
    payload = PayloadFactory.command("/deploy", text="production --force", user="U7", channel="C7")
    handler = DeployHandler(build_context(payload))

    assert DeployHandler.matches(payload)
    assert not DeployHandler.matches(PayloadFactory.command("/rollback"))
    assert handler.command_name == "/deploy"
    assert handler.command_text == "production --force"
    assert handler.params == {"text": "production --force"}
    assert handler.trigger_id.startswith("trigger_")
    assert handler.user == "U7"
    assert handler.channel == "C7"


def test_action_handler_matching():
    assert ApproveHandler.matches(PayloadFactory.action("approve_button"))
    assert not ApproveHandler.matches(PayloadFactory.action("reject_button"))
    assert not ApproveHandler.matches(PayloadFactory.command("/approve_button"))
    assert ScopedApproveHandler.matches(PayloadFactory.action("approve_button", block_id="approval_block"))
    assert not ScopedApproveHandler.matches(PayloadFactory.action("approve_button", block_id="other"))
    assert RequestHandler.matches(PayloadFactory.action("approve_request_42"))
    assert not RequestHandler.matches(PayloadFactory.action("deny_request_42"))


def test_action_handler_accessors():
    payload = PayloadFactory.action("approve_button", value="req-1", block_id="blk")
    handler = ApproveHandler(build_context(payload))

    assert handler.received_action_id == "approve_button"
    assert handler.received_block_id == "blk"
    assert handler.action_value == "req-1"
    assert handler.trigger_id == payload["trigger_id"]


def test_shortcut_handler_global_and_message():
    global_payload = PayloadFactory.shortcut("create_ticket")
    message_payload = PayloadFactory.shortcut("create_ticket", type="message", message_text="quote me")

    assert TicketShortcut.matches(global_payload)
    assert TicketShortcut.matches(message_payload)
    assert CreateShortcut.matches(PayloadFactory.shortcut("create_issue"))
    assert not TicketShortcut.matches(PayloadFactory.shortcut("other"))

    global_handler = TicketShortcut(build_context(global_payload))
    message_handler = TicketShortcut(build_context(message_payload))
    assert global_handler.shortcut_type == "global"
    assert global_handler.message_text is None
    assert message_handler.shortcut_type == "message"
    assert message_handler.message_text == "quote me"
    assert message_handler.received_callback_id == "create_ticket"


def test_view_submission_handler():
    values = {"title_block": {"title_input": {"type": "plain_text_input", "value": "Broken"}}}
    payload = PayloadFactory.view_submission("ticket_modal", values=values, private_metadata="C1", user="U5")
    handler = TicketSubmit(build_context(payload))

    assert TicketSubmit.matches(payload)
    assert not TicketSubmit.matches(PayloadFactory.view_closed("ticket_modal"))
    assert handler.values["title_block"]["title_input"]["value"] == "Broken"
    assert handler.private_metadata == "C1"
    assert handler.user_id == "U5"
    assert handler.view_hash == payload["view"]["hash"]
    assert handler.response_urls == []


def test_view_closed_handler():
    payload = PayloadFactory.view_closed("wizard_step_2", is_cleared=True)
    handler = WizardClosed(build_context(payload))

    assert WizardClosed.matches(payload)
    assert not WizardClosed.matches(PayloadFactory.view_submission("wizard_step_2"))
    assert handler.is_cleared
    assert handler.received_callback_id == "wizard_step_2"


def test_handler_middleware_wraps_handle_and_can_short_circuit():
    calls = []

    class Recorder(Middleware):
        def call(self, context, next_):
            calls.append("before")
            next_()
            calls.append("after")

    class Gate(Middleware):
        def call(self, context, next_):
            calls.append("blocked")

    class Recorded(EventHandler):
        event_type = "message"
        middleware = [Recorder]

        def handle(self):
            calls.append("handle")

    class Blocked(EventHandler):
        event_type = "message"
        middleware = [Gate]

        def handle(self):
            calls.append("never")

    Recorded(build_context(PayloadFactory.message("hi"))).call()
    Blocked(build_context(PayloadFactory.message("hi"))).call()

    assert calls == ["before", "handle", "after", "blocked"]
