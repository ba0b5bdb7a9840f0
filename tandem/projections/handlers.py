"""Leaf projections: the places where application effects are plugged in.

Two authoring styles are provided:

- Routed: subclass HandlerProjection (or TypedHandlerProjection) and mark
  methods with @handles_event. The handler's annotation names the payload
  type it handles; the projection is defined for exactly those types.
- Functional: PartialProjection (or TypedPartialProjection) pairs an
  explicit predicate with an effect function.
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from ..domain import Event, ProjectionNotDefinedError, payload_of
from ..routing import setup_event_handling
from .projection import Projection
from .typed import TypedProjection

if TYPE_CHECKING:
    from ..routing import EventRouter

A = TypeVar("A")


class _RoutedHandlers:
    """Mixin providing annotation-based routing for projection subclasses."""

    __slots__ = ()

    # Class-level routing table (set during __init_subclass__)
    _event_router: ClassVar["EventRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._event_router = setup_event_handling(cls)

    def is_defined_for(self, event: object) -> bool:
        return self._event_router.handles(type(payload_of(event)))

    async def _route(self, event: object) -> Any:
        if isinstance(event, Event):
            result = self._event_router.route(self, event.data, event_wrapper=event)
        else:
            result = self._event_router.route(self, event)
        # Await coroutines, futures and tasks returned by the handler
        if inspect.isawaitable(result):
            return await result
        return result


class HandlerProjection(_RoutedHandlers, Projection):
    """Projection routing events to @handles_event methods by payload type.

    Handler methods may be async or plain functions. A handler annotated
    with a payload type receives the payload; one annotated ``Event[T]``
    receives the full envelope when the event arrives wrapped.

    Example:
        >>> class CatalogProjection(HandlerProjection):
        ...     def __init__(self, store: CatalogStore):
        ...         self.store = store
        ...
        ...     @handles_event
        ...     async def on_created(self, event: ItemCreated) -> None:
        ...         await self.store.put(event.item_id, event.name)
        ...
        ...     @handles_event
        ...     async def on_renamed(self, event: Event[ItemRenamed]) -> None:
        ...         await self.store.rename(event.data.item_id, event.data.name)
        >>>
        >>> projection = CatalogProjection(store)
        >>> projection.is_defined_for(ItemDeleted(item_id=item_id))
        False
    """

    async def dispatch(self, event: object) -> None:
        await self._route(event)


class TypedHandlerProjection(_RoutedHandlers, TypedProjection[A], Generic[A]):
    """TypedProjection routing events to @handles_event methods.

    The return value of the selected handler is the projection's result.

    Example:
        >>> class StockLevels(TypedHandlerProjection[int]):
        ...     @handles_event
        ...     async def on_received(self, event: StockReceived) -> int:
        ...         return await self.table.add(event.sku, event.quantity)
    """

    async def dispatch(self, event: object) -> A:
        return await self._route(event)


class PartialProjection(Projection):
    """Projection built from an explicit predicate and an effect function.

    Args:
        predicate: Pure function deciding whether the effect applies.
        effect: Async function performing the side effect.
        name: Optional name used in ``repr``.

    Example:
        >>> audit = PartialProjection(
        ...     lambda event: isinstance(payload_of(event), ItemDeleted),
        ...     audit_log.append_async,
        ... )
    """

    __slots__ = ("_predicate", "_effect", "_name")

    def __init__(
        self,
        predicate: Callable[[object], bool],
        effect: Callable[[object], Awaitable[object]],
        name: str | None = None,
    ):
        self._predicate = predicate
        self._effect = effect
        self._name = name

    @classmethod
    def of_type(
        cls,
        *payload_types: type,
        effect: Callable[[object], Awaitable[object]],
        name: str | None = None,
    ) -> "PartialProjection":
        """Build a projection defined for payloads of the given types.

        Event envelopes are unwrapped before the isinstance check; the
        effect receives the event as delivered.
        """
        if not payload_types:
            raise ValueError("of_type requires at least one payload type")

        def predicate(event: object) -> bool:
            return isinstance(payload_of(event), payload_types)

        return cls(predicate, effect, name=name)

    def is_defined_for(self, event: object) -> bool:
        return bool(self._predicate(event))

    async def dispatch(self, event: object) -> None:
        if not self.is_defined_for(event):
            raise ProjectionNotDefinedError(self, event)
        await self._effect(event)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name or self._effect!r})"


class TypedPartialProjection(TypedProjection[A], Generic[A]):
    """TypedProjection built from an explicit predicate and an effect function."""

    __slots__ = ("_predicate", "_effect", "_name")

    def __init__(
        self,
        predicate: Callable[[object], bool],
        effect: Callable[[object], Awaitable[A]],
        name: str | None = None,
    ):
        self._predicate = predicate
        self._effect = effect
        self._name = name

    def is_defined_for(self, event: object) -> bool:
        return bool(self._predicate(event))

    async def dispatch(self, event: object) -> A:
        if not self.is_defined_for(event):
            raise ProjectionNotDefinedError(self, event)
        return await self._effect(event)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name or self._effect!r})"
