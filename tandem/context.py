import contextvars
from dataclasses import dataclass, replace

from ulid import ULID


@dataclass(frozen=True)
class ExecutionContext:
    """Immutable context for tracing an event through its projections.

    The context is restored from an Event envelope before the event is
    delivered, so leaf effects and LoggingProjection can tag their output
    with the ids of the logical operation that produced the event.

    Attributes:
        correlation_id: ID that traces an entire logical operation. Remains
            constant throughout the flow.
        causation_id: ID of what directly caused the current work. While an
            event is being projected, this is the event id.

    Examples:
        >>> ctx = ExecutionContext.create()
        >>> event_ctx = ctx.for_event(event.id)
        >>> set_context(event_ctx)
    """

    correlation_id: ULID | None = None
    causation_id: ULID | None = None

    @classmethod
    def create(cls, correlation_id: ULID | None = None) -> "ExecutionContext":
        """Create a new context, typically at a system entry point.

        Args:
            correlation_id: Optional correlation ID. If not provided, a new ULID
                is generated. At entry points, causation_id is set to
                correlation_id.

        Returns:
            A new ExecutionContext instance.
        """
        if correlation_id is None:
            correlation_id = ULID()

        return cls(correlation_id=correlation_id, causation_id=correlation_id)

    def for_event(self, event_id: ULID) -> "ExecutionContext":
        """Create a child context for projecting an event.

        The correlation_id is inherited. The causation_id becomes the event_id.

        Args:
            event_id: The ID of the event being projected.

        Returns:
            A new ExecutionContext with causation_id set to event_id.
        """
        return replace(self, causation_id=event_id)


_context: contextvars.ContextVar[ExecutionContext | None] = contextvars.ContextVar(
    "execution_context", default=None
)


def get_context() -> ExecutionContext:
    """Get the current execution context.

    If no context has been set, returns an empty ExecutionContext with all
    fields None.
    """
    ctx = _context.get()
    if ctx is None:
        return ExecutionContext()
    return ctx


def set_context(context: ExecutionContext) -> None:
    """Set the current execution context."""
    _context.set(context)


def clear_context() -> None:
    """Clear the current execution context."""
    _context.set(None)


def get_or_create_context() -> ExecutionContext:
    """Get the current context, or create and set a new one if not set.

    Returns:
        The current or newly created ExecutionContext.
    """
    ctx = _context.get()
    if ctx is None:
        ctx = ExecutionContext.create()
        set_context(ctx)
    return ctx


def context_extra() -> dict[str, str]:
    """Build logging ``extra`` fields from the current context."""
    extra: dict[str, str] = {}
    ctx = get_context()
    if ctx.correlation_id is not None:
        extra["correlation_id"] = str(ctx.correlation_id)
    if ctx.causation_id is not None:
        extra["causation_id"] = str(ctx.causation_id)
    return extra
