"""Startup and shutdown events for the upload service."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from robyn import Robyn

from app.core.logger import LogIcon, logger
from app.core.settings import settings as st


T = TypeVar("T")


class BaseEvent(ABC, Generic[T]):
    """A resource prepared when the server starts and released when it stops."""

    name: str

    @abstractmethod
    async def startup(self) -> T: ...

    async def shutdown(self, resource: T) -> None:  # noqa: B027
        """Release ``resource``. Events owning nothing to release keep this no-op."""


class Lifespan:
    """Starts events in registration order and stops the started ones in reverse."""

    def __init__(self, *event_classes: type[BaseEvent[Any]]) -> None:
        self._event_classes = list(event_classes)
        self._running: list[tuple[BaseEvent[Any], Any]] = []

    def register(self, event_cls: type[BaseEvent[Any]]) -> "Lifespan":
        self._event_classes.append(event_cls)
        return self

    @property
    def resources(self) -> dict[str, Any]:
        """What each running event returned from startup, by event name."""
        return {event.name: resource for event, resource in self._running}

    async def startup(self) -> None:
        logger.info("Starting upload service", icon=LogIcon.START, version=st.API_VERSION)
        for event_cls in self._event_classes:
            event = event_cls()
            try:
                resource = await event.startup()
            except Exception:
                logger.error(f"Startup event failed: {event.name}", icon=LogIcon.ERROR)
                await self.shutdown()
                raise
            self._running.append((event, resource))
            logger.info(f"Startup event ready: {event.name}", icon=LogIcon.SUCCESS)

    async def shutdown(self) -> None:
        while self._running:
            event, resource = self._running.pop()
            await event.shutdown(resource)
            logger.info(f"Shutdown event done: {event.name}", icon=LogIcon.COMPLETE)


def attach_lifespan(app: Robyn, *event_classes: type[BaseEvent[Any]]) -> Lifespan:
    """Hook a lifespan running ``event_classes`` into the app's startup and shutdown."""
    lifespan = Lifespan(*event_classes)
    app.startup_handler(lifespan.startup)
    app.shutdown_handler(lifespan.shutdown)
    return lifespan
