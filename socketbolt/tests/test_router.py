from socketbolt.handlers import CommandHandler, EventHandler
from socketbolt.router import Router
from socketbolt.testing import PayloadFactory


class FirstMessage(EventHandler):
    event_type = "message"


class SecondMessage(EventHandler):
    event_type = "message"


class Deploy(CommandHandler):
    command = "/deploy"


def test_route_returns_matches_in_registration_order():
    router = Router()
    router.register(SecondMessage)
    router.register(Deploy)
    router.register(FirstMessage)

    assert router.route(PayloadFactory.message("hi")) == [SecondMessage, FirstMessage]
    assert router.route(PayloadFactory.command("/deploy")) == [Deploy]
    assert router.route({"type": "unknown"}) == []


def test_duplicate_registration_is_ignored():
    router = Router()

    assert router.register(Deploy) is Deploy
    router.register(Deploy)

    assert router.handler_count == 1
    assert router.handlers == (Deploy,)


def test_clear_removes_handlers():
    router = Router()
    router.register(Deploy)

    router.clear()

    assert router.handler_count == 0
