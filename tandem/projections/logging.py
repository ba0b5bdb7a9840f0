"""Logging decorator for projections."""

import logging

from ..context import context_extra
from ..domain import Event, payload_of
from .projection import Projection

LOGGER = logging.getLogger(__name__)


class LoggingProjection(Projection):
    """Projection that logs each dispatched event, then delegates.

    Definedness is the wrapped projection's. Only events the wrapped
    projection is defined for are logged. Event data is NOT logged to avoid
    exposing PII; the record carries the payload type, the projection and
    the correlation/causation IDs of the current execution context.
    Failures are neither logged nor caught here.

    Attributes:
        inner: The wrapped projection.
        level: The numeric logging level (e.g., logging.INFO).

    Examples:
        >>> root = LoggingProjection(catalog.and_then(search_index), "INFO")
        >>> await root.on_event(event)
    """

    __slots__ = ("inner", "level")

    def __init__(self, inner: Projection, level: str = "DEBUG"):
        """Initialize the logging projection.

        Args:
            inner: Projection to wrap.
            level: String representation of the log level (e.g.,
                "INFO", "DEBUG"). Case-insensitive.
        """
        self.inner = inner
        self.level = getattr(logging, level.upper())

    def is_defined_for(self, event: object) -> bool:
        return self.inner.is_defined_for(event)

    async def dispatch(self, event: object) -> None:
        extra = {
            "event_type": type(payload_of(event)).__name__,
            "projection": type(self.inner).__name__,
        }
        if isinstance(event, Event):
            extra["event_id"] = str(event.id)
            extra["sequence_number"] = str(event.sequence_number)
        extra.update(context_extra())

        LOGGER.log(self.level, "Dispatching event", extra=extra)
        await self.inner.dispatch(event)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.inner!r})"
