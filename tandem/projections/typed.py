"""Typed projections, whose effect produces a value.

A TypedProjection only composes through its untyped adapter:
``as_untyped()`` keeps the definedness and discards the produced value.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar, Union

from .projection import Projection

if TYPE_CHECKING:
    from .composite import AndThenProjection, OrElseProjection

A = TypeVar("A")


class TypedProjection(ABC, Generic[A]):
    """Base class for projections whose effect produces a value of type A.

    Same contract as Projection: ``is_defined_for`` is a pure predicate and
    ``dispatch`` is only called for events it accepts.

    Example:
        >>> class RowsWritten(TypedProjection[int]):
        ...     def is_defined_for(self, event: object) -> bool:
        ...         return isinstance(payload_of(event), ItemCreated)
        ...
        ...     async def dispatch(self, event: object) -> int:
        ...         return await self.table.upsert(payload_of(event))
        >>>
        >>> root = RowsWritten(table).and_then(audit)  # adapted via as_untyped()
    """

    __slots__ = ()

    @abstractmethod
    def is_defined_for(self, event: object) -> bool:
        """Return True if this projection acts on ``event``."""
        ...

    @abstractmethod
    async def dispatch(self, event: object) -> A:
        """Run the effect for ``event`` and return its result."""
        ...

    async def on_event(self, event: object) -> A | None:
        """Project ``event`` if defined, returning the result or None."""
        if self.is_defined_for(event):
            return await self.dispatch(event)
        return None

    def as_untyped(self) -> Projection:
        """Adapt this projection to an untyped Projection.

        The adapter is defined exactly where this projection is, awaits the
        typed effect and discards its value. Failures propagate unchanged.
        """
        return UntypedAdapter(self)

    def and_then(self, other: Union[Projection, "TypedProjection"]) -> "AndThenProjection":
        """Adapt this projection and compose it with ``other`` (see Projection.and_then)."""
        return self.as_untyped().and_then(other)

    def or_else(self, fallback: Union[Projection, "TypedProjection"]) -> "OrElseProjection":
        """Adapt this projection and compose it with ``fallback`` (see Projection.or_else)."""
        return self.as_untyped().or_else(fallback)


class UntypedAdapter(Projection):
    """Projection view of a TypedProjection that discards the produced value."""

    __slots__ = ("_typed",)

    def __init__(self, typed: TypedProjection[object]):
        self._typed = typed

    @property
    def typed(self) -> TypedProjection[object]:
        return self._typed

    def is_defined_for(self, event: object) -> bool:
        return self._typed.is_defined_for(event)

    async def dispatch(self, event: object) -> None:
        await self._typed.dispatch(event)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._typed!r})"
