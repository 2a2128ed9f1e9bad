"""End-to-end lifecycle tests against a loopback fake server."""

from __future__ import annotations

import asyncio
import logging

import pytest

from ircengine.errors import NoServerError, TransportError
from ircengine.irc import IRCClient
from ircengine.irc.models import ConnectionState
from tests.fixtures.irc_server import wait_until


async def _register(client, irc_server, nick: str = "mybot") -> None:
    assert await client.connect() is True
    await irc_server.wait_for_line(f"NICK {nick}")
    await irc_server.welcome(nick)
    await wait_until(lambda: client.connected)


@pytest.mark.asyncio
async def test_connect_sends_registration(make_client, irc_server):
    client = make_client(realName="Test Bot", userName="botuser")
    assert await client.connect() is True
    await irc_server.wait_for_line("USER botuser 8 * :Test Bot")
    assert irc_server.received[:2] == ["NICK mybot", "USER botuser 8 * :Test Bot"]
    assert client.state is ConnectionState.AWAITING_REGISTRATION
    assert client.connected is False


@pytest.mark.asyncio
async def test_send_dropped_before_registration(make_client, irc_server):
    client = make_client()
    await client.connect()
    await irc_server.wait_for_line("NICK mybot")
    assert client.send("PRIVMSG #chan :too early") is False
    await irc_server.welcome()
    await wait_until(lambda: client.connected)
    assert client.send("PRIVMSG #chan :now") is True
    await irc_server.wait_for_line("PRIVMSG #chan :now")
    assert "PRIVMSG #chan :too early" not in irc_server.received


@pytest.mark.asyncio
async def test_ping_answered_during_registration(make_client, irc_server):
    client = make_client()
    await client.connect()
    await irc_server.wait_for_line("NICK mybot")
    await irc_server.push("PING :abc123\r\n")
    await irc_server.wait_for_line("PONG abc123")


@pytest.mark.asyncio
async def test_registration_sets_session(make_client, irc_server):
    client = make_client()
    connected: list[str] = []
    client.on("connected", connected.append)

    await _register(client, irc_server)

    assert connected == ["irc.test"]
    assert client.session.current_nick == "mybot"
    assert client.session.server_name == "irc.test"
    assert client.state is ConnectionState.CONNECTED
    assert client.watchdog.armed


@pytest.mark.asyncio
async def test_ping_publishes_no_events(make_client, irc_server):
    client = make_client()
    await _register(client, irc_server)
    seen: list = []
    client.on("*", lambda *a: seen.append(a))

    await irc_server.push("PING :abc123\r\n")
    await irc_server.wait_for_line("PONG abc123")

    assert irc_server.received.count("PONG abc123") == 1
    assert seen == []


@pytest.mark.asyncio
async def test_disconnect_resets_state(make_client, irc_server):
    client = make_client()
    await _register(client, irc_server)
    disconnected: list = []
    client.on("disconnected", disconnected.append)

    client.disconnect("bye")

    assert client.connected is False
    assert client.session.current_nick == ""
    assert client.session.server_name == ""
    assert not client.watchdog.armed
    assert client.state is ConnectionState.DISCONNECTED
    assert disconnected == [False]
    await irc_server.wait_for_line("QUIT :bye")
    await client.wait_closed()
    assert disconnected == [False]


@pytest.mark.asyncio
async def test_disconnect_default_reason(make_client, irc_server):
    client = make_client()
    await _register(client, irc_server)
    client.disconnect()
    await irc_server.wait_for_line("QUIT :Leaving")


@pytest.mark.asyncio
async def test_disconnect_when_idle_is_noop(make_client):
    client = make_client()
    disconnected: list = []
    client.on("disconnected", disconnected.append)
    client.disconnect("nothing")
    assert disconnected == []
    assert client.state is ConnectionState.IDLE


@pytest.mark.asyncio
async def test_server_close_transitions_once(make_client, irc_server):
    client = make_client()
    await _register(client, irc_server)
    disconnected: list = []
    client.on("disconnected", disconnected.append)

    await irc_server.drop_client()
    await client.wait_closed()

    assert disconnected == [False]
    assert client.connected is False
    assert not client.watchdog.armed


@pytest.mark.asyncio
async def test_watchdog_times_out_silent_connection(make_client, irc_server):
    client = make_client(idleTimeoutSeconds=0.2)
    disconnected: list = []
    client.on("disconnected", disconnected.append)
    await _register(client, irc_server)

    await irc_server.wait_for_line("QUIT :Timeout", timeout=2.0)
    await client.wait_closed()

    assert irc_server.received.count("QUIT :Timeout") == 1
    assert disconnected == [False]
    assert client.connected is False


@pytest.mark.asyncio
async def test_inbound_traffic_keeps_connection_alive(make_client, irc_server):
    client = make_client(idleTimeoutSeconds=0.3)
    await _register(client, irc_server)

    for i in range(6):
        await asyncio.sleep(0.1)
        await irc_server.push(f":srv NOTICE mybot :tick {i}\r\n" if i % 2 else "PING :k\r\n")

    assert client.connected is True
    assert "QUIT :Timeout" not in irc_server.received


@pytest.mark.asyncio
async def test_no_timeout_after_disconnect(make_client, irc_server):
    client = make_client(idleTimeoutSeconds=0.1)
    await _register(client, irc_server)
    client.disconnect("done")
    await asyncio.sleep(0.25)
    assert irc_server.received.count("QUIT :done") == 1
    assert "QUIT :Timeout" not in irc_server.received


@pytest.mark.asyncio
async def test_connect_without_host_reports_no_server():
    client = IRCClient.create("", "mybot")
    errors: list = []
    client.on("error", errors.append)

    assert await client.connect() is False

    assert len(errors) == 1
    assert isinstance(errors[0], NoServerError)
    assert client.state is ConnectionState.IDLE


@pytest.mark.asyncio
async def test_whitespace_host_reports_no_server():
    client = IRCClient.create("localhost", "mybot")
    errors: list = []
    client.on("error", errors.append)
    assert await client.connect("   ") is False
    assert isinstance(errors[0], NoServerError)


@pytest.mark.asyncio
async def test_connect_refused_reports_transport_error(unused_tcp_port):
    client = IRCClient.create(f"127.0.0.1:{unused_tcp_port}", "mybot")
    errors: list = []
    disconnected: list = []
    client.on("error", errors.append)
    client.on("disconnected", disconnected.append)

    assert await client.connect() is False

    assert isinstance(errors[0], TransportError)
    assert disconnected == [errors[0]]
    assert client.state is ConnectionState.DISCONNECTED


@pytest.mark.asyncio
async def test_lines_after_disconnect_in_handler_are_discarded(make_client, irc_server):
    client = make_client()
    await _register(client, irc_server)
    notices: list[str] = []

    def on_notice(source: str, target: str, text: str) -> None:
        notices.append(text)
        if text == "stop":
            client.disconnect("stopping")

    client.on("notice", on_notice)
    await irc_server.push(
        ":srv NOTICE mybot :first\r\n:srv NOTICE mybot :stop\r\n:srv NOTICE mybot :late\r\n"
    )
    await irc_server.wait_for_line("QUIT :stopping")
    await client.wait_closed()

    assert notices == ["first", "stop"]


@pytest.mark.asyncio
async def test_chancmd_round_trip(make_client, irc_server):
    client = make_client()
    client.on("chancmd:seen", lambda u, c, args, target, respond: respond(f"no sign of {args}"))
    await _register(client, irc_server)

    await irc_server.push(":Gates!g@h PRIVMSG #chan :!seen Bob > Alice\r\n")

    await irc_server.wait_for_line("PRIVMSG #chan :Alice: no sign of Bob")


@pytest.mark.asyncio
async def test_reconnect_after_disconnect(make_client, irc_server):
    client = make_client()
    await _register(client, irc_server)
    client.disconnect("again")
    await client.wait_closed()
    await wait_until(lambda: irc_server.client_gone.is_set())

    irc_server.received.clear()
    await _register(client, irc_server)
    assert client.state is ConnectionState.CONNECTED


@pytest.mark.asyncio
async def test_instances_are_independent(make_client, irc_server):
    first = make_client()
    second = make_client(nick="otherbot")
    await _register(first, irc_server)

    assert first.connected is True
    assert second.connected is False
    assert second.session.current_nick == ""
    assert first.bus is not second.bus


@pytest.mark.asyncio
async def test_connect_retries_before_failing(unused_tcp_port, monkeypatch, caplog):
    import ircengine.irc.connection as connection_mod

    monkeypatch.setattr(connection_mod, "IRC_CONNECT_BACKOFF_BASE", 0.0)
    client = IRCClient.create(
        f"127.0.0.1:{unused_tcp_port}", "retrybot", connectAttempts=3
    )
    errors: list = []
    client.on("error", errors.append)

    with caplog.at_level(logging.WARNING, logger="ircengine"):
        assert await client.connect() is False

    retries = [r for r in caplog.records if "retrying" in r.getMessage()]
    assert len(retries) == 2
    assert len(errors) == 1


@pytest.mark.asyncio
async def test_debug_logging_logs_wire_traffic(make_client, irc_server, caplog):
    client = make_client(nick="dbgbot", debugLogging=True)
    caplog.set_level(logging.DEBUG)
    await _register(client, irc_server, nick="dbgbot")
    messages = [r.getMessage() for r in caplog.records]
    assert any("SEND: NICK dbgbot" in m for m in messages)
    assert any("READ: :irc.test 001 dbgbot" in m for m in messages)


def test_debug_logging_stays_with_its_client():
    quiet = IRCClient.create("irc.test", "same")
    loud = IRCClient.create("irc.test", "same", debugLogging=True)
    assert quiet.log.logger is not loud.log.logger
    assert loud.log.logger.level == logging.DEBUG
    assert quiet.log.logger.level == logging.NOTSET


@pytest.mark.asyncio
async def test_read_error_reports_transport_error(make_client, irc_server, monkeypatch):
    client = make_client()
    await _register(client, irc_server)
    errors: list = []
    disconnected: list = []
    client.on("error", errors.append)
    client.on("disconnected", disconnected.append)

    async def reset_read(_n: int) -> bytes:
        raise ConnectionResetError("connection reset by peer")

    # The pending read completes on the next line; the following read fails.
    monkeypatch.setattr(client.connection.reader, "read", reset_read)
    await irc_server.push(":irc.test NOTICE mybot :hello\r\n")
    await client.wait_closed()

    assert len(errors) == 1
    assert isinstance(errors[0], TransportError)
    assert errors[0].data["cause"] == "ConnectionResetError"
    assert disconnected == [errors[0]]
    assert client.state is ConnectionState.DISCONNECTED
    assert client.connected is False
    assert client.session.current_nick == ""
    assert not client.watchdog.armed


@pytest.mark.asyncio
async def test_disconnect_while_awaiting_registration_closes(make_client, irc_server):
    client = make_client()
    disconnected: list = []
    client.on("disconnected", disconnected.append)
    await client.connect()
    await irc_server.wait_for_line("NICK mybot")

    client.disconnect("early")

    assert disconnected == [False]
    assert client.state is ConnectionState.DISCONNECTED
    await irc_server.wait_for_line("QUIT :early")
