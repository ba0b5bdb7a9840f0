"""Projection contract: a partial, composable handler of domain events.

A projection pairs a definedness predicate with an asynchronous effect.
``is_defined_for`` answers whether the projection acts on an event without
running anything; ``dispatch`` runs the effect; ``on_event`` is the safe
entry point that only dispatches when the projection is defined and
otherwise completes as a no-op.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .composite import AndThenProjection, OrElseProjection
    from .typed import TypedProjection


class Projection(ABC):
    """Base class for untyped projections.

    Subclasses implement ``is_defined_for`` and ``dispatch``. The two must
    agree: ``dispatch`` is only ever invoked by the framework for events
    where ``is_defined_for`` returns True, and ``is_defined_for`` must give
    the same answer every time it is asked about the same event.

    Projections hold no per-call state. Any read model an effect writes to
    lives outside the projection and must cope with concurrent dispatch.

    Example:
        >>> catalog = CatalogProjection(store)
        >>> audit = AuditProjection(log)
        >>> root = catalog.and_then(audit).or_else(DeadLetterProjection())
        >>> await root.on_event(event)
    """

    __slots__ = ()

    @abstractmethod
    def is_defined_for(self, event: object) -> bool:
        """Return True if this projection acts on ``event``.

        Must not perform side effects.
        """
        ...

    @abstractmethod
    async def dispatch(self, event: object) -> None:
        """Run the projection's effect for ``event``.

        Only call this for events where ``is_defined_for`` is True; use
        ``on_event`` to feed events unconditionally.
        """
        ...

    async def on_event(self, event: object) -> None:
        """Project ``event`` if this projection is defined for it.

        Undefined events complete immediately as a successful no-op, so
        every projection can be fed every event. Failures raised by the
        effect propagate unchanged.
        """
        if self.is_defined_for(event):
            await self.dispatch(event)

    def and_then(self, other: Union["Projection", "TypedProjection"]) -> "AndThenProjection":
        """Compose this projection with ``other``, run one after the other.

        Events are sent to both projections, this one first. ``other`` only
        starts once this projection completed successfully. After a failure
        the host may redeliver the event to the whole composite, so leaf
        effects should be idempotent.

        A TypedProjection operand is adapted with ``as_untyped()``.
        """
        from .composite import AndThenProjection, as_projection

        return AndThenProjection(self, as_projection(other))

    def or_else(self, fallback: Union["Projection", "TypedProjection"]) -> "OrElseProjection":
        """Compose this projection with a ``fallback``.

        If this projection is defined for an event it is applied, otherwise
        the fallback is. Exactly one of the two runs.

        A TypedProjection operand is adapted with ``as_untyped()``.
        """
        from .composite import OrElseProjection, as_projection

        return OrElseProjection(self, as_projection(fallback))

    @staticmethod
    def empty() -> "Projection":
        """Return the projection that is defined for no event."""
        from .composite import EMPTY

        return EMPTY
