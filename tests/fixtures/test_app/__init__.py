"""Catalog test application: events, read models and projections."""

from .events import ItemCreated, ItemDeleted, ItemPurged, ItemRenamed, PriceChanged
from .projections import CatalogProjection, CreatedCounter, RenameHistoryProjection
from .read_models import CatalogStore, EffectLog

__all__ = [
    "ItemCreated",
    "ItemRenamed",
    "ItemDeleted",
    "ItemPurged",
    "PriceChanged",
    "CatalogProjection",
    "RenameHistoryProjection",
    "CreatedCounter",
    "CatalogStore",
    "EffectLog",
]
