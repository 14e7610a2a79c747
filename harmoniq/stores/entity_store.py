# ============================================================================
# Harmoniq Safety - Entity Store
# ============================================================================
# A keyed collection of plain records persisted as JSON documents in the
# store_items table. Every feature module reads and writes its records
# through one of these.
# ============================================================================

import json
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, Union

from ..db import _get_conn, _ts

logger = logging.getLogger("harmoniq.stores")

STORE_PREFIX = "harmoniq_"

SeedData = Union[List[Dict], Callable[[], List[Dict]], None]


def is_valid_collection(data: Any) -> bool:
    """A loadable collection is a list of dicts that each carry an id."""
    if not isinstance(data, list):
        return False
    for item in data:
        if not isinstance(item, dict):
            return False
        if not item.get("id"):
            return False
    return True


class EntityStore:
    """CRUD over one named collection."""

    def __init__(self, storage_key: str, seed: SeedData = None):
        if not storage_key.startswith(STORE_PREFIX):
            storage_key = STORE_PREFIX + storage_key
        self.storage_key = storage_key
        self._seed = seed

    def __repr__(self):
        return f"<EntityStore {self.storage_key}>"

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _seed_items(self) -> List[Dict]:
        seed = self._seed() if callable(self._seed) else self._seed
        if seed is None:
            return []
        if not is_valid_collection(seed):
            logger.warning("Seed data for %s failed shape validation; ignoring", self.storage_key)
            return []
        return seed

    def load(self) -> List[Dict]:
        """Return stored items, filling an empty store from its seed data."""
        if self.count() == 0:
            seed = self._seed_items()
            if seed:
                self.replace_all(seed)
                logger.info("Seeded %s with %d items", self.storage_key, len(seed))
        return self.items()

    def replace_all(self, items: List[Dict]) -> int:
        """Replace the whole collection. Invalid collections are rejected."""
        if not is_valid_collection(items):
            logger.warning("Refusing to store malformed collection in %s", self.storage_key)
            return 0
        conn = _get_conn()
        conn.execute("DELETE FROM store_items WHERE store_key = ?", (self.storage_key,))
        ts = _ts()
        for item in items:
            record = dict(item)
            record.setdefault("created_at", ts)
            record.setdefault("updated_at", record["created_at"])
            conn.execute("""
                INSERT INTO store_items (store_key, id, company_id, data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (self.storage_key, str(record["id"]), record.get("company_id"),
                  json.dumps(record), record["created_at"], record["updated_at"]))
        conn.commit()
        conn.close()
        return len(items)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def items(self) -> List[Dict]:
        conn = _get_conn()
        rows = conn.execute(
            "SELECT data FROM store_items WHERE store_key = ? ORDER BY rowid",
            (self.storage_key,),
        ).fetchall()
        conn.close()
        return [json.loads(r["data"]) for r in rows]

    def items_for_company(self, company_id: Optional[str]) -> List[Dict]:
        """Items owned by a company. Without a company every item is returned."""
        if not company_id:
            return self.items()
        conn = _get_conn()
        rows = conn.execute(
            "SELECT data FROM store_items WHERE store_key = ? AND company_id = ? ORDER BY rowid",
            (self.storage_key, company_id),
        ).fetchall()
        conn.close()
        return [json.loads(r["data"]) for r in rows]

    def get_by_id(self, item_id: Optional[str]) -> Optional[Dict]:
        if not item_id:
            return None
        conn = _get_conn()
        row = conn.execute(
            "SELECT data FROM store_items WHERE store_key = ? AND id = ?",
            (self.storage_key, str(item_id)),
        ).fetchone()
        conn.close()
        return json.loads(row["data"]) if row else None

    def find(self, company_id: Optional[str] = None, **match) -> Optional[Dict]:
        """First item whose fields equal every keyword given."""
        for item in self.items_for_company(company_id):
            if all(item.get(k) == v for k, v in match.items()):
                return item
        return None

    def filter(self, company_id: Optional[str] = None, **match) -> List[Dict]:
        return [
            item for item in self.items_for_company(company_id)
            if all(item.get(k) == v for k, v in match.items())
        ]

    def count(self, company_id: Optional[str] = None) -> int:
        conn = _get_conn()
        if company_id:
            row = conn.execute(
                "SELECT COUNT(*) FROM store_items WHERE store_key = ? AND company_id = ?",
                (self.storage_key, company_id),
            ).fetchone()
        else:
            row = conn.execute(
                "SELECT COUNT(*) FROM store_items WHERE store_key = ?",
                (self.storage_key,),
            ).fetchone()
        conn.close()
        return row[0]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add(self, item: Dict) -> Dict:
        """Insert an item, or replace the item with the same id."""
        record = dict(item)
        if not record.get("id"):
            record["id"] = str(uuid.uuid4())
        ts = _ts()
        record.setdefault("created_at", ts)
        record.setdefault("updated_at", ts)

        conn = _get_conn()
        conn.execute("""
            INSERT INTO store_items (store_key, id, company_id, data, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(store_key, id) DO UPDATE SET
                company_id = excluded.company_id,
                data = excluded.data,
                updated_at = excluded.updated_at
        """, (self.storage_key, str(record["id"]), record.get("company_id"),
              json.dumps(record), record["created_at"], record["updated_at"]))
        conn.commit()
        conn.close()
        return record

    def update(self, item_id: str, changes: Dict) -> Optional[Dict]:
        """Shallow-merge changes into an item. Returns None when it does not exist."""
        current = self.get_by_id(item_id)
        if current is None:
            return None
        merged = dict(current)
        merged.update(changes)
        merged["id"] = current["id"]
        merged["updated_at"] = _ts()
        return self.add(merged)

    def remove(self, item_id: str) -> bool:
        conn = _get_conn()
        cur = conn.execute(
            "DELETE FROM store_items WHERE store_key = ? AND id = ?",
            (self.storage_key, str(item_id)),
        )
        conn.commit()
        conn.close()
        return cur.rowcount > 0

    def clear(self) -> None:
        conn = _get_conn()
        conn.execute("DELETE FROM store_items WHERE store_key = ?", (self.storage_key,))
        conn.commit()
        conn.close()


def clear_all_stores() -> int:
    """Remove every harmoniq_* collection. Returns the number of rows deleted."""
    conn = _get_conn()
    cur = conn.execute(
        "DELETE FROM store_items WHERE store_key LIKE ? ESCAPE '\\'",
        (STORE_PREFIX.replace("_", "\\_") + "%",),
    )
    conn.commit()
    conn.close()
    logger.info("Cleared %d stored items", cur.rowcount)
    return cur.rowcount
