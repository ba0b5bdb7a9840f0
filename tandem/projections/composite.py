"""Composite projections built from exactly two children.

Composites are immutable binary trees: ``first`` and ``second`` are fixed
at construction and every composite is itself a Projection, so composites
nest to any depth. N-ary composition is expressed by nesting, or with the
``first_of`` and ``chain`` folds.
"""

from functools import reduce
from typing import Any, Union

from ..domain import ProjectionNotDefinedError
from .projection import Projection
from .typed import TypedProjection

ProjectionLike = Union[Projection, TypedProjection[Any]]


def as_projection(operand: ProjectionLike) -> Projection:
    """Return ``operand`` as an untyped Projection.

    TypedProjections are adapted with ``as_untyped()``.

    Raises:
        TypeError: If the operand is not a projection.
    """
    if isinstance(operand, Projection):
        return operand
    if isinstance(operand, TypedProjection):
        return operand.as_untyped()
    raise TypeError(
        f"Cannot compose a projection with {type(operand).__name__}; "
        "expected Projection or TypedProjection"
    )


class ComposedProjection(Projection):
    """Base for projections composed of two other projections.

    A composite is defined for an event whenever either child is. This is
    what lets an or-else composite see through a nested and-then composite
    to decide whether any real work would happen.
    """

    __slots__ = ("_first", "_second")

    def __init__(self, first: Projection, second: Projection):
        object.__setattr__(self, "_first", first)
        object.__setattr__(self, "_second", second)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self) -> tuple[type, tuple[Projection, Projection]]:
        return (type(self), (self._first, self._second))

    @property
    def first(self) -> Projection:
        return self._first

    @property
    def second(self) -> Projection:
        return self._second

    def is_defined_for(self, event: object) -> bool:
        return self._first.is_defined_for(event) or self._second.is_defined_for(event)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._first!r}, {self._second!r})"


class AndThenProjection(ComposedProjection):
    """Sends each event to both children, ``first`` then ``second``.

    ``second`` starts only after ``first`` completed successfully, so the
    effect of ``first`` is observable by the time ``second`` runs. A failure
    in either child fails the composite, and a failure in ``first`` means
    ``second`` never runs.

    Both children are driven through ``on_event``: a child that is not
    defined for the event completes as a no-op inside the chain.

    Nothing is retried here. The host may redeliver a failed event to the
    whole composite, so every leaf effect must be safe to repeat.

    Example:
        >>> root = (catalog.and_then(search_index)).or_else(dead_letters)
        >>> await root.on_event(ItemDeleted(item_id=item_id))
        >>> # dead_letters only runs if neither catalog nor search_index
        >>> # handles ItemDeleted
    """

    __slots__ = ()

    async def dispatch(self, event: object) -> None:
        await self._first.on_event(event)
        await self._second.on_event(event)


class OrElseProjection(ComposedProjection):
    """Applies ``first`` when it is defined for the event, else ``second``.

    Exactly one child runs per dispatched event; ``second`` is not consulted
    when ``first`` is defined.
    """

    __slots__ = ()

    async def dispatch(self, event: object) -> None:
        if self._first.is_defined_for(event):
            await self._first.dispatch(event)
        else:
            await self._second.dispatch(event)


class EmptyProjection(Projection):
    """Projection with an empty domain: defined for no event."""

    __slots__ = ()

    def is_defined_for(self, event: object) -> bool:
        return False

    async def dispatch(self, event: object) -> None:
        raise ProjectionNotDefinedError(self, event)

    def __repr__(self) -> str:
        return "EmptyProjection()"


EMPTY = EmptyProjection()


def first_of(*projections: ProjectionLike) -> Projection:
    """Fold projections with ``or_else``, starting from the empty projection.

    The first projection defined for an event handles it. With no
    arguments, returns the empty projection.
    """
    return reduce(lambda acc, p: acc.or_else(p), projections, Projection.empty())


def chain(*projections: ProjectionLike) -> Projection:
    """Fold projections with ``and_then``, in argument order.

    With no arguments, returns the empty projection; with one, returns it
    (adapted if typed).
    """
    if not projections:
        return Projection.empty()
    head, *rest = projections
    return reduce(lambda acc, p: acc.and_then(p), rest, as_projection(head))
