from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from ..constants import CONNECT_RETRY_MAX_BACKOFF_SECONDS
from ..logging_config import log_structured_error
from ..logs.logger import logger
from .internal import (
    ConfigError,
    InvalidIntentError,
    InvalidOperationError,
    LineBufferOverflowError,
    RelayChatError,
    TransportError,
)

if TYPE_CHECKING:  # pragma: no cover
    from ..irc.connection import IRCConnection


def categorize_error(error: BaseException) -> str:
    """Map an exception onto the category used for aggregation."""
    if isinstance(error, TransportError | LineBufferOverflowError | OSError | TimeoutError):
        return "network"
    if isinstance(error, InvalidOperationError | InvalidIntentError):
        return "usage"
    if isinstance(error, ConfigError):
        return "config"
    if isinstance(error, RelayChatError):
        return "internal"
    return "unknown"


def log_error(message: str, error: BaseException, context: dict | None = None) -> None:
    """Logs an error message with the associated exception details.

    The error is categorized and forwarded to structured logging so repeated
    failures show up in the session's error summary.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    log_structured_error(
        error_type=categorize_error(error),
        message=f"{message}: {str(error)}",
        exception=error if isinstance(error, Exception) else None,
        context=context,
    )


async def connect_with_retry(
    connection: IRCConnection,
    host: str | None = None,
    port: int | None = None,
    *,
    attempts: int = 3,
    max_backoff: float = CONNECT_RETRY_MAX_BACKOFF_SECONDS,
) -> bool:
    """Connect, retrying failed attempts with exponential backoff.

    The connection core never retries on its own; this helper is the caller
    side policy used by the terminal front-end. Each failed attempt has
    already been published as a ``ConnectionFailure`` event by the connection.

    Returns:
        True once an attempt succeeds, False when every attempt failed.
    """

    def before_sleep(retry_state: RetryCallState) -> None:
        logger.log_event(
            "app",
            "retry_connect",
            level=logging.WARNING,
            host=host or connection.host,
            port=port or connection.port,
            attempt=retry_state.attempt_number + 1,
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=1, max=max_backoff),
        retry=retry_if_result(lambda ok: ok is False),
        before_sleep=before_sleep,
        retry_error_callback=lambda retry_state: False,
    )
    return await retrying(connection.connect, host, port)
