"""Domain primitives shared by projections.

- Event: Envelope carrying a domain event payload and its metadata
- ProjectionError: Base exception for projection machinery errors
- ProjectionNotDefinedError: Dispatch called for an unhandled event
"""

from .event import Event, payload_of, utc_now
from .exceptions import ProjectionError, ProjectionNotDefinedError

__all__ = [
    "Event",
    "payload_of",
    "utc_now",
    "ProjectionError",
    "ProjectionNotDefinedError",
]
