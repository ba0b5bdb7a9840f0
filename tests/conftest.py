"""Central test fixtures - imports from the catalog test_app."""

from collections.abc import Callable

import pytest
from ulid import ULID

from tandem import PartialProjection
from tests.fixtures.test_app import CatalogStore, EffectLog
from tests.fixtures.test_app.recording import recording_projection


@pytest.fixture
def effect_log() -> EffectLog:
    """Create an empty effect log."""
    return EffectLog()


@pytest.fixture
def catalog_store() -> CatalogStore:
    """Create an empty catalog read model."""
    return CatalogStore()


@pytest.fixture
def recording(effect_log: EffectLog) -> Callable[..., PartialProjection]:
    """Factory for recording leaves sharing the test's effect log."""

    def factory(name: str, *payload_types: type, fail: bool = False) -> PartialProjection:
        return recording_projection(name, *payload_types, log=effect_log, fail=fail)

    return factory


@pytest.fixture
def aggregate_id() -> ULID:
    """Generate a unique aggregate ID."""
    return ULID()


@pytest.fixture(autouse=True)
def clear_execution_context():
    """Automatically clear execution context after each test."""
    yield
    from tandem.context import clear_context

    clear_context()
