"""Socket ownership and connection lifecycle transitions."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..constants import (
    IRC_CONNECT_BACKOFF_BASE,
    IRC_CONNECT_BACKOFF_MAX,
    IRC_DEFAULT_QUIT_REASON,
    IRC_LINE_TERMINATOR,
    IRC_READ_CHUNK_SIZE,
)
from ..errors import EngineError, NoServerError, log_error, wrap_transport_error
from .framer import LineFramer
from .models import ConnectionState

if TYPE_CHECKING:  # pragma: no cover
    from .client import IRCClient


class IRCConnection:
    """Owns the stream pair and the partial-line buffer of one client.

    Every write to the wire goes through ``write_line``. Transitions:
    ``connect`` moves Idle/Disconnected to Connecting and, once the socket is
    open, to AwaitingRegistration; ``registered`` moves to Connected; every
    close path ends in ``_closed`` which moves to Disconnected.
    """

    def __init__(self, client: IRCClient) -> None:
        self.client = client
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        self.framer = LineFramer()
        self._read_task: asyncio.Task[None] | None = None

    @property
    def is_open(self) -> bool:
        return self.writer is not None

    async def connect(self, host: str | None = None, port: int | None = None) -> bool:
        client = self.client
        cfg = client.config
        host = (host or cfg.server.host or "").strip()
        if not host:
            client.log.log_event("irc", "no_server", level=logging.ERROR)
            client.bus.publish("error", NoServerError())
            return False
        port = port or cfg.server.port

        if self.is_open:
            self.disconnect("Reconnecting")

        client._set_state(ConnectionState.CONNECTING)  # noqa: SLF001
        client.log.log_event("irc", "connect_start", host=host, port=port)
        try:
            reader, writer = await self._open(host, port)
        except (OSError, TimeoutError) as e:
            err = wrap_transport_error(e, host=host, port=port)
            client.log.log_event(
                "irc",
                "connect_failed",
                level=logging.ERROR,
                host=host,
                port=port,
                error=str(err),
            )
            client.bus.publish("error", err)
            self._closed(err)
            return False

        self.reader, self.writer = reader, writer
        self.framer.reset()
        client._set_state(ConnectionState.AWAITING_REGISTRATION)  # noqa: SLF001
        client.log.log_event("irc", "connection_established")

        real_name = cfg.real_name
        self.write_line(f"NICK {cfg.nick}")
        self.write_line(f"USER {cfg.user_name} 8 * :{real_name}")
        client.log.log_event(
            "irc", "registration_sent", level=logging.DEBUG, nick=cfg.nick
        )
        self._read_task = asyncio.create_task(
            self._read_loop(reader, writer), name=f"ircengine-read-{cfg.nick}"
        )
        return True

    async def _open(
        self, host: str, port: int
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        cfg = self.client.config
        retrying = AsyncRetrying(
            stop=stop_after_attempt(cfg.connect_attempts),
            wait=wait_exponential(
                multiplier=IRC_CONNECT_BACKOFF_BASE, max=IRC_CONNECT_BACKOFF_MAX
            ),
            retry=retry_if_exception_type((OSError, TimeoutError)),
            before_sleep=self._log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await asyncio.wait_for(
                    asyncio.open_connection(host, port),
                    timeout=cfg.connect_timeout_seconds,
                )
        raise TimeoutError("connect attempts exhausted")  # pragma: no cover

    def _log_retry(self, retry_state) -> None:  # type: ignore[no-untyped-def]
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        self.client.log.log_event(
            "irc",
            "connect_retry",
            level=logging.WARNING,
            attempt=retry_state.attempt_number,
            error=str(exc),
        )

    def write_line(self, line: str) -> bool:
        writer = self.writer
        if writer is None:
            return False
        self.client.log.log_event(
            "irc",
            "send",
            level=logging.DEBUG,
            user=self.client.session.current_nick,
            line=line,
        )
        try:
            writer.write(f"{line}{IRC_LINE_TERMINATOR}".encode())
        except (OSError, RuntimeError) as e:
            self.client.log.log_event(
                "irc", "write_error", level=logging.ERROR, error=str(e)
            )
            return False
        return True

    def registered(self, server_name: str, nick: str) -> None:
        client = self.client
        if client.state is not ConnectionState.AWAITING_REGISTRATION:
            return
        session = client.session
        session.connected = True
        session.current_nick = nick
        session.server_name = server_name
        client._set_state(ConnectionState.CONNECTED)  # noqa: SLF001
        client.watchdog.arm()
        client.log.log_event("irc", "registered", user=nick, server=server_name, nick=nick)
        client.bus.publish("connected", server_name)

    def disconnect(self, reason: str | None = None) -> None:
        """Send ``QUIT :<reason>`` and close the socket.

        A no-op only when no socket is open. A connection still awaiting
        registration is closed as well, and publishes ``disconnected``.
        """
        if self.writer is None:
            self.client.log.log_event("irc", "disconnect_noop", level=logging.DEBUG)
            return
        reason = reason or IRC_DEFAULT_QUIT_REASON
        self.client.log.log_event(
            "irc",
            "disconnect_requested",
            user=self.client.session.current_nick,
            reason=reason,
        )
        self.write_line(f"QUIT :{reason}")
        self._closed(None)

    async def _read_loop(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        error: EngineError | None = None
        try:
            while self.writer is writer:
                data = await reader.read(IRC_READ_CHUNK_SIZE)
                if not data:
                    if self.writer is writer:
                        self.client.log.log_event(
                            "irc", "connection_ended", level=logging.DEBUG
                        )
                    break
                self._dispatch_chunk(data, writer)
        except asyncio.CancelledError:
            raise
        except Exception as e:  # noqa: BLE001
            if self.writer is writer:
                host, port = self._peer(writer)
                error = wrap_transport_error(e, host=host, port=port)
                log_error("Connection read failed", error)
                self.client.bus.publish("error", error)
        if self.writer is writer:
            self._closed(error)

    def _dispatch_chunk(self, data: bytes, writer: asyncio.StreamWriter) -> None:
        lines = self.framer.feed(data)
        for i, line in enumerate(lines):
            if self.writer is not writer:
                self.client.log.log_event(
                    "irc",
                    "discarded_after_close",
                    level=logging.DEBUG,
                    count=len(lines) - i,
                )
                return
            self.client.dispatcher.handle_line(line)

    @staticmethod
    def _peer(writer: asyncio.StreamWriter) -> tuple[str, int]:
        peer = writer.get_extra_info("peername")
        if isinstance(peer, tuple) and len(peer) >= 2:
            return str(peer[0]), int(peer[1])
        return "?", 0

    def _closed(self, error: EngineError | None) -> None:
        """Release the socket and run the disconnected transition once."""
        writer, self.writer, self.reader = self.writer, None, None
        self.framer.reset()
        if writer is not None:
            try:
                writer.close()
            except (OSError, RuntimeError) as e:
                self.client.log.log_event(
                    "irc", "write_error", level=logging.DEBUG, error=str(e)
                )
        client = self.client
        client.watchdog.disarm()
        client.session.reset()
        client._set_state(ConnectionState.DISCONNECTED)  # noqa: SLF001
        client.log.log_event(
            "irc",
            "disconnected",
            level=logging.WARNING if error else logging.INFO,
            error=error or False,
        )
        client.bus.publish("disconnected", error or False)

    async def wait_closed(self) -> None:
        task = self._read_task
        if task is not None and not task.done():
            await asyncio.wait({task})
