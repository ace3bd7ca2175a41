from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol

# (event_type, payload) as delivered to every API process.
EventHandler = Callable[[str, dict[str, Any]], Awaitable[None]]


class EventPublisher(Protocol):
    async def publish(self, channel: str, payload: dict[str, Any]) -> None:
        """``payload["event_type"]`` selects the event; the rest is its body."""


class EventSubscriber(Protocol):
    async def start(self) -> None: ...

    async def stop(self) -> None: ...
