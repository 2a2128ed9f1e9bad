"""Loopback IRC server double for end-to-end engine tests."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll ``predicate`` until true; fail the test on timeout."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)


class FakeIRCServer:
    """Accepts one client at a time and records every line it sends."""

    def __init__(self) -> None:
        self.received: list[str] = []
        self.port = 0
        self._server: asyncio.Server | None = None
        self._writer: asyncio.StreamWriter | None = None
        self.client_connected = asyncio.Event()
        self.client_gone = asyncio.Event()

    async def start(self) -> FakeIRCServer:
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        self.port = self._server.sockets[0].getsockname()[1]
        return self

    async def _handle(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self._writer = writer
        self.client_gone.clear()
        self.client_connected.set()
        try:
            while True:
                line = await reader.readline()
                if not line:
                    break
                self.received.append(line.decode().rstrip("\r\n"))
        except ConnectionError:
            pass
        finally:
            self.client_gone.set()
            self.client_connected.clear()

    async def push(self, text: str) -> None:
        """Send raw text (include terminators yourself)."""
        await self.client_connected.wait()
        assert self._writer is not None
        self._writer.write(text.encode())
        await self._writer.drain()

    async def welcome(self, nick: str = "mybot", server: str = "irc.test") -> None:
        await self.push(f":{server} 001 {nick} :Welcome to the network {nick}\r\n")

    async def wait_for_line(self, line: str, timeout: float = 2.0) -> None:
        await wait_until(lambda: line in self.received, timeout)

    async def drop_client(self) -> None:
        if self._writer is not None:
            self._writer.close()
            with contextlib.suppress(ConnectionError):
                await self._writer.wait_closed()

    async def stop(self) -> None:
        await self.drop_client()
        if self._server is not None:
            self._server.close()
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._server.wait_closed(), timeout=1.0)
