import logging

import pytest
import pytest_asyncio

from relaychat.config.model import ClientConfig
from relaychat.irc.connection import IRCConnection
from relaychat.logging_config import error_aggregator
from tests.fakes import FakeServer


@pytest_asyncio.fixture
async def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(host="irc.example.net", port=6667, nickname="me")


@pytest_asyncio.fixture
async def connection(server: FakeServer, config: ClientConfig) -> IRCConnection:
    conn = IRCConnection(config, open_connection=server.open_connection)
    yield conn
    await conn.close()


@pytest.fixture(autouse=True)
def _reset_error_aggregator():
    yield
    error_aggregator.clear()


@pytest.fixture
def restore_root_logging():
    """Keep LoggerConfigurator.configure() from leaking into other tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
