from __future__ import annotations

import pytest
import pytest_asyncio

from ircengine.config import EngineConfig
from ircengine.irc import IRCClient
from tests.fixtures.irc_server import FakeIRCServer


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig(
        server={"host": "127.0.0.1", "port": 6667},
        nick="mybot",
        realName="Test Bot",
        idleTimeoutSeconds=30,
    )


class RecordingClient(IRCClient):
    """Client whose wire writes are captured instead of sent."""

    def __init__(self, config: EngineConfig) -> None:
        super().__init__(config)
        self.sent: list[str] = []
        self.connection.write_line = self._capture  # type: ignore[method-assign]

    def _capture(self, line: str) -> bool:
        self.sent.append(line)
        return True


@pytest.fixture
def recording_client(config: EngineConfig) -> RecordingClient:
    return RecordingClient(config)


@pytest_asyncio.fixture
async def irc_server():
    server = await FakeIRCServer().start()
    yield server
    await server.stop()


@pytest_asyncio.fixture
async def make_client(irc_server: FakeIRCServer):
    """Factory for clients pointed at the fake server."""
    created: list[IRCClient] = []

    def _make(**overrides) -> IRCClient:  # type: ignore[no-untyped-def]
        data = {
            "server": {"host": "127.0.0.1", "port": irc_server.port},
            "nick": "mybot",
            **overrides,
        }
        client = IRCClient(EngineConfig.from_dict(data))
        created.append(client)
        return client

    yield _make
    for client in created:
        client.disconnect("test teardown")
