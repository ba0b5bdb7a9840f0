import inspect
from collections.abc import Callable
from functools import singledispatch
from typing import Any, TypeVar, get_args, get_origin

from .domain import Event, ProjectionNotDefinedError

T = TypeVar("T")

_IS_EVENT_HANDLER_ATTR = "_is_event_handler"
_HANDLES_EVENT_TYPE_ATTR = "_handles_event_type"
# Marker for handlers that want the Event wrapper, not just payload
_WANTS_EVENT_WRAPPER_ATTR = "_wants_event_wrapper"


def _extract_handler_type(func: Callable[..., Any], param_index: int = 1) -> tuple[type, bool]:
    """Extract the payload type a handler method is annotated with.

    Detects whether the handler wants the Event wrapper (annotated as
    ``Event[T]``) or just the payload (annotated as ``T``).

    Args:
        func: The handler method to inspect.
        param_index: Index of the parameter to extract
            (0=self, 1=first arg, etc.)

    Returns:
        A tuple of (payload_type, wants_wrapper).

    Raises:
        ValueError: If the parameter lacks a type annotation.
    """
    annotation = None
    func_name = getattr(func, "__name__", repr(func))

    # Fast path: use __annotations__ directly if available
    annotations = getattr(func, "__annotations__", None)
    code = getattr(func, "__code__", None)
    if annotations and code:
        param_names = code.co_varnames
        if len(param_names) <= param_index:
            raise ValueError(f"Handler {func_name} must have at least {param_index + 1} parameters")
        param_name = param_names[param_index]
        if param_name in annotations:
            annotation = annotations[param_name]

    if annotation is None:
        sig = inspect.signature(func)
        params = list(sig.parameters.values())

        if len(params) <= param_index:
            raise ValueError(f"Handler {func_name} must have at least {param_index + 1} parameters")

        param = params[param_index]

        if param.annotation is inspect.Parameter.empty:
            raise ValueError(
                f"Handler {func_name} parameter '{param.name}' must have a type annotation"
            )
        annotation = param.annotation

    origin = get_origin(annotation)
    if origin is Event:
        args = get_args(annotation)
        if args:
            return (args[0], True)
        raise ValueError(
            f"Handler {func_name}: Event type must have a type argument, e.g., Event[ItemCreated]"
        )

    # Pydantic builds a concrete subclass for Event[T] at runtime
    if isinstance(annotation, type) and issubclass(annotation, Event):
        metadata = getattr(annotation, "__pydantic_generic_metadata__", None)
        if metadata:
            pydantic_origin = metadata.get("origin")
            pydantic_args = metadata.get("args", ())
            if pydantic_origin is Event and pydantic_args:
                return (pydantic_args[0], True)
        raise ValueError(
            f"Handler {func_name}: Event type must have a type argument, e.g., Event[ItemCreated]"
        )

    return (annotation, False)


class EventRouter:
    """Routes event payloads to type-specific handler methods.

    Uses singledispatch on the payload type, so a handler registered for a
    base class also receives instances of its subclasses. Unlike a plain
    dispatch table, the router can be asked whether a payload type has a
    handler without invoking it, which is what gives routed projections
    their definedness.
    """

    __slots__ = ("_dispatch", "_fallback")

    def __init__(self) -> None:
        @singledispatch
        def dispatch(payload: object, instance: object, *args: Any, **kwargs: Any) -> object:
            raise ProjectionNotDefinedError(instance, payload)

        self._dispatch = dispatch
        self._fallback = dispatch.registry[object]

    def register(
        self,
        payload_type: type,
        handler: Callable[..., object],
        wants_wrapper: bool = False,
    ) -> None:
        """Register a handler for a payload type.

        Args:
            payload_type: The payload class this handler processes.
            handler: The method to call for this payload type.
            wants_wrapper: If True, the handler receives the Event wrapper
                passed to ``route`` as ``event_wrapper``. If False, it
                receives just the payload.
        """
        if wants_wrapper:

            def wrapper(
                payload: object, inst: object, *args: Any, h: Any = handler, **kwargs: Any
            ) -> object:
                event_wrapper = kwargs.pop("event_wrapper", None)
                if event_wrapper is not None:
                    return h(inst, event_wrapper, *args, **kwargs)
                # Raw payload delivered without an envelope
                return h(inst, payload, *args, **kwargs)

            self._dispatch.register(payload_type)(wrapper)
        else:

            def payload_wrapper(
                payload: object, inst: object, *args: Any, h: Any = handler, **kwargs: Any
            ) -> object:
                kwargs.pop("event_wrapper", None)
                return h(inst, payload, *args, **kwargs)

            self._dispatch.register(payload_type)(payload_wrapper)

    def handles(self, payload_type: type) -> bool:
        """Return True if a handler is registered for ``payload_type``."""
        return self._dispatch.dispatch(payload_type) is not self._fallback

    def route(self, instance: Any, payload: Any, *args: Any, **kwargs: Any) -> object:
        """Route a payload to its registered handler.

        Args:
            instance: The instance to call the handler on (self).
            payload: The event payload to route on.
            *args: Additional positional arguments to pass to handler.
            **kwargs: Additional keyword arguments. Pass
                ``event_wrapper=<Event>`` to provide the full envelope to
                handlers that want it.

        Returns:
            The result of the handler method (possibly a coroutine).

        Raises:
            ProjectionNotDefinedError: If no handler is registered.
        """
        return self._dispatch(payload, instance, *args, **kwargs)


def handles_event(func: Callable[..., T]) -> Callable[..., T]:
    """Decorator marking a method as an event handler of a routed projection.

    The payload type is extracted from the method's type annotation.

    Example:
        >>> class CatalogProjection(HandlerProjection):
        ...     @handles_event
        ...     async def on_created(self, evt: ItemCreated) -> None:
        ...         await self.store.insert(evt.item_id, evt.name)
        ...
        ...     @handles_event
        ...     async def on_renamed(self, evt: Event[ItemRenamed]) -> None:
        ...         await self.store.rename(evt.data.item_id, evt.data.name, evt.sequence_number)
    """
    payload_type, wants_wrapper = _extract_handler_type(func, param_index=1)
    setattr(func, _HANDLES_EVENT_TYPE_ATTR, payload_type)
    setattr(func, _IS_EVENT_HANDLER_ATTR, True)
    setattr(func, _WANTS_EVENT_WRAPPER_ATTR, wants_wrapper)
    return func


def setup_event_handling(cls: type) -> EventRouter:
    """Build an EventRouter from the @handles_event methods of a class.

    Base classes are scanned first so that a subclass handler for the same
    payload type replaces the inherited one.

    Args:
        cls: The class to set up routing for.

    Returns:
        A configured EventRouter.
    """
    router = EventRouter()

    for klass in reversed(cls.__mro__):
        for value in klass.__dict__.values():
            if getattr(value, _IS_EVENT_HANDLER_ATTR, False) is not True:
                continue
            router.register(
                getattr(value, _HANDLES_EVENT_TYPE_ATTR),
                value,
                wants_wrapper=getattr(value, _WANTS_EVENT_WRAPPER_ATTR, False),
            )

    return router
