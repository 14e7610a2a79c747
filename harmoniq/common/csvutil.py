"""
Harmoniq Safety - CSV writing with spreadsheet formula protection
"""
import csv
import io
from typing import Any, Dict, Iterable, List, Optional

FORMULA_TRIGGERS = ("=", "+", "-", "@", "\t", "\r")
BOM = "\ufeff"


def sanitize_cell(value: Any) -> str:
    """Stringify a cell; values that would start a formula get a leading quote."""
    if value is None:
        return ""
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    if text and text[0] in FORMULA_TRIGGERS:
        return "'" + text
    return text


def _header_union(rows: Iterable[Dict]) -> List[str]:
    headers: List[str] = []
    seen = set()
    for row in rows:
        for key in row.keys():
            if key not in seen:
                seen.add(key)
                headers.append(key)
    return headers


def rows_to_csv(rows: List[Dict], headers: Optional[List[str]] = None, bom: bool = True) -> str:
    """Serialize dict rows to CSV text.

    Headers default to the union of keys across all rows in first-seen order.
    Returns an empty string for no rows.
    """
    if not rows:
        return ""
    headers = headers or _header_union(rows)
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([sanitize_cell(row.get(h)) for h in headers])
    text = buf.getvalue().rstrip("\n")
    return (BOM + text) if bom else text
