"""
Harmoniq Safety - Audit log (append-only)
"""
import json
import logging
import sqlite3
from typing import Dict, List, Optional

from .db import _get_conn, _ts

logger = logging.getLogger("harmoniq.audit")


def log_action(
    company_id: Optional[str],
    user_id: Optional[str],
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    old_values: Optional[Dict] = None,
    new_values: Optional[Dict] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> Optional[int]:
    """Append an audit entry. A failed write is logged and does not block the caller."""
    try:
        conn = _get_conn()
        cur = conn.execute("""
            INSERT INTO audit_log
            (company_id, user_id, action, entity_type, entity_id, old_values, new_values,
             ip_address, user_agent, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            company_id, user_id, action, entity_type,
            str(entity_id) if entity_id is not None else None,
            json.dumps(old_values, default=str) if old_values is not None else None,
            json.dumps(new_values, default=str) if new_values is not None else None,
            ip_address, user_agent, _ts(),
        ))
        conn.commit()
        row_id = cur.lastrowid
        conn.close()
        return row_id
    except sqlite3.Error:
        logger.exception("Audit write failed: %s %s/%s", action, entity_type, entity_id)
        return None


def get_audit_log(company_id: Optional[str] = None, entity_type: Optional[str] = None,
                  limit: int = 200) -> List[Dict]:
    conn = _get_conn()
    sql = "SELECT * FROM audit_log WHERE 1=1"
    params = []
    if company_id:
        sql += " AND company_id = ?"
        params.append(company_id)
    if entity_type:
        sql += " AND entity_type = ?"
        params.append(entity_type)
    sql += " ORDER BY id DESC LIMIT ?"
    params.append(limit)
    rows = conn.execute(sql, params).fetchall()
    conn.close()
    result = []
    for r in rows:
        entry = dict(r)
        for key in ("old_values", "new_values"):
            if entry.get(key):
                entry[key] = json.loads(entry[key])
        result.append(entry)
    return result


def client_meta(request) -> Dict:
    """ip_address / user_agent kwargs for log_action."""
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }
