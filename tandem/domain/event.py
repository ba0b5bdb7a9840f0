from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

T = TypeVar("T")


def utc_now() -> datetime:
    """Get the current UTC timestamp.

    Returns:
        Current datetime with UTC timezone information
    """
    return datetime.now(tz=timezone.utc)


class Event(BaseModel, Generic[T]):
    """Immutable envelope around a domain event payload.

    Projections accept any object as a domain event. When an event arrives
    wrapped in an Event, handler routing looks through the envelope to the
    ``data`` payload, and handlers annotated as ``Event[T]`` receive the
    envelope itself. The metadata carries what a projection needs to stay
    idempotent under redelivery (``id``, ``sequence_number``) and to
    propagate tracing (``correlation_id``, ``causation_id``).

    Type Parameters:
        T: Payload type (e.g., ItemCreated, ItemRenamed)

    Attributes:
        id: Unique identifier for this specific event instance
        aggregate_id: ID of the aggregate that produced this event
        data: Typed event payload
        sequence_number: Position in the aggregate's event stream (1-indexed)
        timestamp: When the event occurred (UTC timezone)
        correlation_id: Optional correlation ID for tracing the logical operation
        causation_id: Optional ID of what caused this event

    Examples:
        >>> event = Event(
        ...     aggregate_id=item_id,
        ...     data=ItemRenamed(item_id=item_id, name="bolt"),
        ...     sequence_number=2,
        ... )
        >>> await catalog_projection.on_event(event)
    """

    model_config = ConfigDict(frozen=True)

    id: ULID = Field(
        default_factory=ULID,
        description="Unique identifier for this event instance",
    )
    aggregate_id: ULID = Field(description="ID of the aggregate that produced this event")
    data: T = Field(description="Event payload")
    sequence_number: int = Field(
        ge=1,
        description="Position in aggregate's event stream (1-indexed, monotonically increasing)",
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC timezone)",
    )
    correlation_id: ULID | None = Field(
        default=None,
        description="Correlation ID for tracing the entire logical operation",
    )
    causation_id: ULID | None = Field(
        default=None,
        description="ID of what directly caused this event",
    )


def payload_of(event: object) -> object:
    """Return the payload of an Event envelope, or the event itself."""
    if isinstance(event, Event):
        return event.data
    return event
