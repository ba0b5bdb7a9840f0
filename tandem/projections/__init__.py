"""Composable event projections.

- Projection / TypedProjection: the partial-handler contracts
- AndThenProjection / OrElseProjection: binary composites
- EmptyProjection: defined for no event
- HandlerProjection / TypedHandlerProjection: @handles_event routed leaves
- PartialProjection / TypedPartialProjection: predicate + effect leaves
- LoggingProjection: logs dispatched events, then delegates
- first_of / chain: fold many projections with or_else / and_then
"""

from .composite import (
    AndThenProjection,
    ComposedProjection,
    EmptyProjection,
    OrElseProjection,
    as_projection,
    chain,
    first_of,
)
from .handlers import (
    HandlerProjection,
    PartialProjection,
    TypedHandlerProjection,
    TypedPartialProjection,
)
from .logging import LoggingProjection
from .projection import Projection
from .typed import TypedProjection, UntypedAdapter

__all__ = [
    "Projection",
    "TypedProjection",
    "UntypedAdapter",
    "ComposedProjection",
    "AndThenProjection",
    "OrElseProjection",
    "EmptyProjection",
    "as_projection",
    "first_of",
    "chain",
    "HandlerProjection",
    "TypedHandlerProjection",
    "PartialProjection",
    "TypedPartialProjection",
    "LoggingProjection",
]
