from collections.abc import Callable
from typing import Any, Generic, TypeVar

from ulid import ULID

from tandem.domain import Event
from tandem.projections import Projection

from .core import Scenario, StateMatches

TReadModel = TypeVar("TReadModel")

READ_MODEL_STATE_KEY = "read_model"


class ProjectionScenario(Scenario[TReadModel], Generic[TReadModel]):
    """A scenario for testing a (possibly composite) projection.

    Payloads given to the scenario are wrapped in Event envelopes sharing
    one aggregate id, numbered from 1, and fed to ``on_event`` in order.
    Errors are recorded per event and do not stop later events.

    Composite projections hold no state, so state expectations are checked
    against the ``read_model`` the leaf effects write to. Without one, the
    projection itself is inspected.

        >>> store = CatalogStore()
        >>> async with ProjectionScenario(catalog.and_then(audit), store) as scenario:
        ...     scenario.given(ItemCreated(item_id="a", name="bolt"))
        ...     scenario.should_have_state(lambda s: s.names["a"] == "bolt")
    """

    def __init__(self, projection: Projection, read_model: TReadModel | None = None):
        super().__init__()
        self.projection = projection
        self.read_model = read_model

    async def perform_actions(self) -> None:
        aggregate_id = ULID()
        for i, payload in enumerate(self.event_payloads, start=1):
            event = (
                payload
                if isinstance(payload, Event)
                else Event(aggregate_id=aggregate_id, data=payload, sequence_number=i)
            )
            try:
                await self.projection.on_event(event)
            except Exception as e:
                self.errors.append(e)

    def should_have_state(
        self, predicate: Callable[[Any], bool]
    ) -> "ProjectionScenario[TReadModel]":
        self.expectations.append(StateMatches(READ_MODEL_STATE_KEY, predicate))
        return self

    async def get_state(self, state_key: Any) -> Any:
        if state_key != READ_MODEL_STATE_KEY:
            return None
        return self.read_model if self.read_model is not None else self.projection
