"""In-process delivery of events to a root projection.

ProjectionDelivery is the smallest host that satisfies the projection
contract: it feeds events to ``on_event`` in order, restores the execution
context carried by Event envelopes, and redelivers an event after a
failure when configured to.
"""

import logging
from collections.abc import Iterable

from .config import DeliverySettings
from .context import ExecutionContext, clear_context, context_extra, set_context
from .domain import Event, payload_of
from .projections import Projection

LOGGER = logging.getLogger(__name__)


class ProjectionDelivery:
    """Delivers events to a root projection, one at a time.

    A failed event is delivered again to the whole root projection up to
    ``settings.max_redeliveries`` times. Composites never retry on their
    own, so with redelivery enabled an and-then chain may re-run children
    that had already succeeded; every leaf effect must be idempotent.
    When redeliveries are exhausted the last failure is re-raised as is.

    Attributes:
        projection: The root projection receiving every event.
        settings: Delivery settings.

    Example:
        >>> delivery = ProjectionDelivery(
        ...     catalog.and_then(search_index),
        ...     DeliverySettings(max_redeliveries=2),
        ... )
        >>> await delivery.deliver_all(events)
    """

    __slots__ = ("projection", "settings", "_level")

    def __init__(self, projection: Projection, settings: DeliverySettings | None = None):
        self.projection = projection
        self.settings = settings or DeliverySettings()
        self._level = getattr(logging, self.settings.log_level)

    async def deliver(self, event: object) -> None:
        """Deliver one event, redelivering on failure as configured.

        If the event is an Event envelope with a correlation_id, the
        execution context is set for the duration of the delivery so that
        effects can propagate it.

        Raises:
            Exception: The failure of the final delivery attempt, unchanged.
        """
        extra = {"event_type": type(payload_of(event)).__name__}

        if not self.projection.is_defined_for(event):
            if self.settings.log_skipped:
                LOGGER.debug("Skipping event", extra=extra)
            return

        context_set = False
        if isinstance(event, Event) and event.correlation_id is not None:
            set_context(ExecutionContext(correlation_id=event.correlation_id).for_event(event.id))
            context_set = True

        try:
            extra.update(context_extra())
            LOGGER.log(self._level, "Delivering event", extra=extra)
            attempt = 0
            while True:
                try:
                    await self.projection.on_event(event)
                    return
                except Exception:
                    if attempt >= self.settings.max_redeliveries:
                        raise
                    attempt += 1
                    LOGGER.warning(
                        "Redelivering event after failure",
                        extra={**extra, "attempt": attempt},
                        exc_info=True,
                    )
        finally:
            if context_set:
                clear_context()

    async def deliver_all(self, events: Iterable[object]) -> int:
        """Deliver events in order, stopping at the first failure.

        Returns:
            The number of events delivered.
        """
        delivered = 0
        for event in events:
            await self.deliver(event)
            delivered += 1
        return delivered
