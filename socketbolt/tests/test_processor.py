import json
import logging

import pytest

from socketbolt.errors import TransportNotReady
from socketbolt.network.processor import EnvelopeProcessor, encode_message
from socketbolt.network.transport.base import Frame, FrameKind


class _Link:
    def __init__(self, connected=True, fail_send=False):
        self.connected = connected
        self.fail_send = fail_send
        self.sent = []
        self.disconnects = []

    async def send(self, data, kind=FrameKind.TEXT):
        if self.fail_send:
            raise TransportNotReady("gone")
        self.sent.append((data, kind))

    async def disconnect(self, reason):
        self.disconnects.append(reason)


def _processor(link):
    dispatched = []

    async def dispatch(envelope):
        dispatched.append(envelope)

    return EnvelopeProcessor(link, dispatch), dispatched


def _text(message):
    return Frame(FrameKind.TEXT, json.dumps(message))


def test_encode_message_is_compact():
    assert encode_message({"envelope_id": "abc"}) == '{"envelope_id":"abc"}'


@pytest.mark.asyncio
async def test_event_envelope_is_acked_then_dispatched():
    link = _Link()
    processor, dispatched = _processor(link)
    envelope = {"envelope_id": "abc", "type": "events_api", "payload": {"event": {"type": "message"}}}

    await processor.process(_text(envelope))

    assert link.sent == [('{"envelope_id":"abc"}', FrameKind.TEXT)]
    assert dispatched == [envelope]


@pytest.mark.asyncio
async def test_envelope_without_id_is_dispatched_without_ack():
    link = _Link()
    processor, dispatched = _processor(link)

    await processor.process(_text({"type": "events_api", "payload": {}}))

    assert link.sent == []
    assert len(dispatched) == 1


@pytest.mark.asyncio
async def test_no_ack_while_disconnected():
    link = _Link(connected=False)
    processor, dispatched = _processor(link)

    await processor.process(_text({"envelope_id": "abc", "type": "events_api"}))

    assert link.sent == []
    assert len(dispatched) == 1


@pytest.mark.asyncio
async def test_failed_ack_drops_envelope(caplog):
    link = _Link(fail_send=True)
    processor, dispatched = _processor(link)

    with caplog.at_level(logging.ERROR):
        await processor.process(_text({"envelope_id": "abc", "type": "events_api"}))

    assert dispatched == []
    assert "Error handling message" in caplog.text


@pytest.mark.asyncio
async def test_ping_message_answered_with_pong_and_num():
    link = _Link()
    processor, dispatched = _processor(link)

    await processor.process(_text({"type": "ping", "num": 7}))
    await processor.process(_text({"type": "ping"}))

    assert [json.loads(data) for data, _ in link.sent] == [{"type": "pong", "num": 7}, {"type": "pong"}]
    assert dispatched == []


@pytest.mark.asyncio
async def test_hello_is_not_dispatched():
    link = _Link()
    processor, dispatched = _processor(link)

    await processor.process(_text({"type": "hello", "num_connections": 1}))

    assert link.sent == []
    assert dispatched == []


@pytest.mark.asyncio
async def test_disconnect_message_closes_connection(caplog):
    link = _Link()
    processor, dispatched = _processor(link)

    with caplog.at_level(logging.INFO):
        await processor.process(_text({"type": "disconnect", "reason": "refresh_requested"}))

    assert link.disconnects == ["refresh_requested"]
    assert dispatched == []
    assert "refresh_requested" in caplog.text


@pytest.mark.asyncio
async def test_transport_ping_echoes_payload_bytes():
    link = _Link()
    processor, dispatched = _processor(link)

    await processor.process(Frame(FrameKind.PING, b"\x00probe"))

    assert link.sent == [(b"\x00probe", FrameKind.PONG)]
    assert dispatched == []


@pytest.mark.asyncio
async def test_transport_ping_ignored_while_disconnected():
    link = _Link(connected=False)
    processor, _ = _processor(link)

    await processor.process(Frame(FrameKind.PING, b"probe"))

    assert link.sent == []


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", [None, "", "plain text", "[1, 2]"])
async def test_non_object_text_is_ignored(raw):
    link = _Link()
    processor, dispatched = _processor(link)

    await processor.process(Frame(FrameKind.TEXT, raw))

    assert link.sent == []
    assert dispatched == []


@pytest.mark.asyncio
async def test_malformed_json_is_logged_and_dropped(caplog):
    link = _Link()
    processor, dispatched = _processor(link)

    with caplog.at_level(logging.ERROR):
        await processor.process(Frame(FrameKind.TEXT, '{"envelope_id": '))

    assert dispatched == []
    assert "Failed to parse message" in caplog.text


@pytest.mark.asyncio
async def test_dispatch_failure_does_not_escape(caplog):
    link = _Link()

    async def broken(envelope):
        raise RuntimeError("consumer exploded")

    processor = EnvelopeProcessor(link, broken)

    with caplog.at_level(logging.ERROR):
        await processor.process(_text({"envelope_id": "abc", "type": "events_api"}))

    assert link.sent == [('{"envelope_id":"abc"}', FrameKind.TEXT)]
    assert "consumer exploded" in caplog.text
