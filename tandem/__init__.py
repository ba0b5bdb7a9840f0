"""Tandem - composable event projections for Python.

Declare partial, asynchronous handlers of domain events and combine them
with ``and_then`` (run both, in order) and ``or_else`` (first defined
wins).
"""

from .config import DeliverySettings
from .delivery import ProjectionDelivery
from .domain import Event, ProjectionError, ProjectionNotDefinedError
from .projections import (
    AndThenProjection,
    EmptyProjection,
    HandlerProjection,
    LoggingProjection,
    OrElseProjection,
    PartialProjection,
    Projection,
    TypedHandlerProjection,
    TypedPartialProjection,
    TypedProjection,
    chain,
    first_of,
)
from .routing import handles_event

__all__ = [
    # Contracts
    "Projection",
    "TypedProjection",
    # Composites
    "AndThenProjection",
    "OrElseProjection",
    "EmptyProjection",
    "first_of",
    "chain",
    # Leaves
    "HandlerProjection",
    "TypedHandlerProjection",
    "PartialProjection",
    "TypedPartialProjection",
    "LoggingProjection",
    # Delivery
    "ProjectionDelivery",
    "DeliverySettings",
    # Domain
    "Event",
    "ProjectionError",
    "ProjectionNotDefinedError",
    # Decorators
    "handles_event",
]
