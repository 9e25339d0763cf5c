from unittest.mock import AsyncMock, Mock

import pytest

from relaychat.errors.handling import categorize_error, connect_with_retry, log_error
from relaychat.errors.internal import (
    ConfigError,
    InvalidIntentError,
    InvalidOperationError,
    LineBufferOverflowError,
    RelayChatError,
    TransportError,
)
from relaychat.logging_config import error_aggregator


@pytest.mark.parametrize(
    "error, category",
    [
        (TransportError("down"), "network"),
        (LineBufferOverflowError(10, 8), "network"),
        (ConnectionRefusedError(), "network"),
        (TimeoutError(), "network"),
        (InvalidOperationError("not connected"), "usage"),
        (InvalidIntentError("bad nick"), "usage"),
        (ConfigError("bad file"), "config"),
        (RelayChatError("other"), "internal"),
        (RuntimeError("boom"), "unknown"),
    ],
)
def test_categorize_error(error, category):
    assert categorize_error(error) == category


def test_error_data_is_copied():
    data = {"state": "connected"}
    err = InvalidOperationError("nope", data=data)
    data["state"] = "changed"
    assert err.data == {"state": "connected"}
    assert isinstance(InvalidIntentError("x"), ValueError)


def test_log_error_records_category():
    log_error("Configuration error", ConfigError("missing"))
    summary = error_aggregator.get_error_summary()
    assert summary["config"]["last_occurrence"]["message"] == "Configuration error: missing"


def _connection() -> Mock:
    conn = Mock()
    conn.host = "irc.example.net"
    conn.port = 6667
    conn.connect = AsyncMock()
    return conn


@pytest.mark.asyncio
async def test_connect_with_retry_succeeds_after_failure():
    conn = _connection()
    conn.connect.side_effect = [False, True]
    assert await connect_with_retry(conn, attempts=3, max_backoff=0) is True
    assert conn.connect.await_count == 2
    conn.connect.assert_awaited_with(None, None)


@pytest.mark.asyncio
async def test_connect_with_retry_gives_up():
    conn = _connection()
    conn.connect.return_value = False
    assert await connect_with_retry(conn, "h", 1, attempts=2, max_backoff=0) is False
    assert conn.connect.await_count == 2
    conn.connect.assert_awaited_with("h", 1)


@pytest.mark.asyncio
async def test_single_attempt_does_not_retry():
    conn = _connection()
    conn.connect.return_value = False
    assert await connect_with_retry(conn, attempts=0, max_backoff=0) is False
    assert conn.connect.await_count == 1
