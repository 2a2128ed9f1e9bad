"""In-process publish/subscribe keyed by event name."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from ..logs.logger import BotLogger, logger as default_logger

Subscriber = Callable[..., Any]

WILDCARD = "*"


class EventBus:
    """Synchronous event dispatcher.

    Named subscribers receive ``(*args)``; wildcard subscribers receive
    ``(event_name, *args)`` after the named ones. Dispatch iterates over a
    snapshot of the subscriber list, so handlers may subscribe or
    unsubscribe while an event is being delivered; the change applies from
    the next publish. A failing subscriber is logged and skipped.

    A subscriber returning an awaitable has it scheduled on the running
    loop as a retained task; the publish itself does not wait for it.
    """

    def __init__(self, log: BotLogger | None = None) -> None:
        self._subscribers: dict[str, list[Subscriber]] = {}
        self._wildcard: list[Subscriber] = []
        self._tasks: set[asyncio.Task[Any]] = set()
        self._log = log or default_logger

    def subscribe(self, event_name: str, handler: Subscriber) -> Subscriber:
        if event_name == WILDCARD:
            return self.subscribe_all(handler)
        self._subscribers.setdefault(event_name, []).append(handler)
        return handler

    def unsubscribe(self, event_name: str, handler: Subscriber) -> bool:
        """Remove the first registration of ``handler``; False if absent."""
        if event_name == WILDCARD:
            return self.unsubscribe_all(handler)
        handlers = self._subscribers.get(event_name)
        if not handlers or not self._remove(handlers, handler):
            return False
        if not handlers:
            del self._subscribers[event_name]
        return True

    def subscribe_all(self, handler: Subscriber) -> Subscriber:
        self._wildcard.append(handler)
        return handler

    def unsubscribe_all(self, handler: Subscriber) -> bool:
        return self._remove(self._wildcard, handler)

    @staticmethod
    def _remove(handlers: list[Subscriber], handler: Subscriber) -> bool:
        # A ``once`` wrapper is also removable through the handler it wraps.
        for i, registered in enumerate(handlers):
            if registered == handler or getattr(registered, "__wrapped__", None) == handler:
                del handlers[i]
                return True
        return False

    def once(self, event_name: str, handler: Subscriber) -> Subscriber:
        """Subscribe ``handler`` for a single delivery of ``event_name``.

        ``unsubscribe(event_name, handler)`` cancels it before delivery.
        """

        def _once(*args: Any) -> Any:
            self.unsubscribe(event_name, _once)
            return handler(*args)

        _once.__wrapped__ = handler  # type: ignore[attr-defined]
        return self.subscribe(event_name, _once)

    def subscribers(self, event_name: str) -> list[Subscriber]:
        if event_name == WILDCARD:
            return list(self._wildcard)
        return list(self._subscribers.get(event_name, ()))

    def publish(self, event_name: str, *args: Any) -> int:
        """Deliver an event; returns the number of handlers invoked."""
        delivered = 0
        for handler in list(self._subscribers.get(event_name, ())):
            self._invoke(event_name, handler, args)
            delivered += 1
        for handler in list(self._wildcard):
            self._invoke(event_name, handler, (event_name, *args))
            delivered += 1
        return delivered

    def _invoke(self, event_name: str, handler: Subscriber, args: tuple[Any, ...]) -> None:
        try:
            result = handler(*args)
        except Exception as e:  # noqa: BLE001
            self._log.log_event(
                "irc",
                "subscriber_error",
                level=logging.ERROR,
                event=event_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return
        if inspect.isawaitable(result):
            self._retain(event_name, result)

    def _retain(self, event_name: str, awaitable: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._log.log_event(
                "irc",
                "async_subscriber_error",
                level=logging.ERROR,
                event=event_name,
                error="no running event loop",
                error_type="RuntimeError",
            )
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return
        task: asyncio.Task[Any] = asyncio.ensure_future(awaitable, loop=loop)
        self._tasks.add(task)

        def _done(t: asyncio.Task[Any]) -> None:
            self._tasks.discard(t)
            if t.cancelled():
                return
            exc = t.exception()
            if exc is not None:
                self._log.log_event(
                    "irc",
                    "async_subscriber_error",
                    level=logging.ERROR,
                    event=event_name,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )

        task.add_done_callback(_done)

    async def drain(self) -> None:
        """Wait for scheduled async subscribers to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
