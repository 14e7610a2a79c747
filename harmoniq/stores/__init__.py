"""
Harmoniq Safety - Entity stores

Named collections backing every feature module, plus demo seed data.
"""
import logging
from typing import Dict

from .. import config
from .entity_store import EntityStore, clear_all_stores, is_valid_collection
from .seed import SEED_BUILDERS

logger = logging.getLogger("harmoniq.stores")

STORE_NAMES = (
    "companies",
    "users",
    "teams",
    "locations",
    "assets",
    "asset_inspections",
    "maintenance_schedules",
    "maintenance_logs",
    "downtime_logs",
    "corrective_actions",
    "work_orders",
    "tickets",
    "incidents",
    "checklist_templates",
    "checklist_submissions",
    "risk_evaluations",
    "notifications",
)

_stores: Dict[str, EntityStore] = {}


def get_store(name: str) -> EntityStore:
    """Get or create the singleton store for a collection name."""
    if name not in STORE_NAMES:
        raise KeyError(f"Unknown store: {name}")
    store = _stores.get(name)
    if store is None:
        seed = SEED_BUILDERS.get(name) if config.SEED_DEMO else None
        store = EntityStore(name, seed=seed)
        _stores[name] = store
    return store


def load_all_stores() -> Dict[str, int]:
    """Load every store, seeding the empty ones. Returns item counts."""
    counts = {}
    for name in STORE_NAMES:
        counts[name] = len(get_store(name).load())
    logger.info("Stores loaded: %s", ", ".join(f"{k}={v}" for k, v in counts.items()))
    return counts


__all__ = [
    "EntityStore",
    "STORE_NAMES",
    "clear_all_stores",
    "get_store",
    "is_valid_collection",
    "load_all_stores",
]
