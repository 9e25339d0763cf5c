"""Event delivery from the connection to its subscribers."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from ..constants import EVENT_QUEUE_SIZE
from ..logs.logger import logger
from .events import DomainEvent

EventHandler = Callable[[DomainEvent], Any]

_CLOSED = object()


class EventSubscription:
    """Ordered, optionally filtered queue of events for one consumer.

    Iterate with ``async for``; iteration ends once the subscription or its
    dispatcher is closed and the remaining events have been consumed.
    """

    def __init__(
        self, event_types: tuple[type, ...] = (), maxsize: int = EVENT_QUEUE_SIZE
    ) -> None:
        self.event_types = event_types
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=max(0, maxsize))
        self._closed = False
        self._closed_event = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed

    def accepts(self, event: DomainEvent) -> bool:
        return not self.event_types or isinstance(event, self.event_types)

    async def put(self, event: DomainEvent) -> None:
        """Queue ``event``, waiting for room while the queue is full.

        The wait ends without queueing once the subscription is closed.
        """
        if self._closed or not self.accepts(event):
            return
        if not self._queue.full():
            self._queue.put_nowait(event)
            return
        putter = asyncio.ensure_future(self._queue.put(event))
        closed = asyncio.ensure_future(self._closed_event.wait())
        try:
            await asyncio.wait((putter, closed), return_when=asyncio.FIRST_COMPLETED)
        finally:
            putter.cancel()
            closed.cancel()

    async def get(self) -> DomainEvent | None:
        """Next event, or ``None`` once closed and drained."""
        if self._closed and self._queue.empty():
            return None
        item = await self._queue.get()
        if item is _CLOSED:
            return None
        return item

    def drain(self) -> list[DomainEvent]:
        """Take every event that is queued right now without waiting."""
        items: list[DomainEvent] = []
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if item is not _CLOSED:
                items.append(item)
        return items

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._closed_event.set()
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            # Consumer stops on the empty check once it has drained the queue
            pass

    def __aiter__(self) -> EventSubscription:
        return self

    async def __anext__(self) -> DomainEvent:
        event = await self.get()
        if event is None:
            raise StopAsyncIteration
        return event


class EventDispatcher:
    """Fans every published event out to subscriptions and handlers.

    Events reach each consumer in publish order. A subscription whose queue is
    full makes ``publish`` wait until the consumer frees a slot or the
    subscription is closed; meanwhile inbound processing is paused.
    Handlers may be plain or async callables; a failing handler is logged and
    does not affect the others.
    """

    def __init__(self, queue_size: int = EVENT_QUEUE_SIZE) -> None:
        self.queue_size = queue_size
        self._subscriptions: list[EventSubscription] = []
        self._handlers: list[EventHandler] = []
        self._closed = False

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions) + len(self._handlers)

    def subscribe(
        self, *event_types: type, maxsize: int | None = None
    ) -> EventSubscription:
        subscription = EventSubscription(
            event_types, self.queue_size if maxsize is None else maxsize
        )
        if self._closed:
            subscription.close()
            return subscription
        self._subscriptions.append(subscription)
        logger.log_event(
            "dispatcher",
            "subscriber_added",
            level=logging.DEBUG,
            filter=",".join(t.__name__ for t in event_types) or "all",
        )
        return subscription

    def unsubscribe(self, subscription: EventSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            logger.log_event("dispatcher", "subscriber_removed", level=logging.DEBUG)
        subscription.close()

    def add_handler(self, handler: EventHandler) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def remove_handler(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    async def publish(self, event: DomainEvent) -> None:
        for subscription in list(self._subscriptions):
            await subscription.put(event)
        for handler in list(self._handlers):
            await self._invoke_handler(handler, event)

    async def _invoke_handler(self, handler: EventHandler, event: DomainEvent) -> None:
        try:
            if inspect.iscoroutinefunction(handler):
                await handler(event)
            else:
                maybe = handler(event)
                if inspect.isawaitable(maybe):
                    await maybe
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "dispatcher",
                "handler_error",
                level=logging.ERROR,
                handler=getattr(handler, "__qualname__", repr(handler)),
                error=str(e),
                error_type=type(e).__name__,
                event=type(event).__name__,
            )

    async def close(self) -> None:
        self._closed = True
        for subscription in self._subscriptions:
            subscription.close()
        self._subscriptions.clear()
        self._handlers.clear()
        logger.log_event("dispatcher", "closed", level=logging.DEBUG)
