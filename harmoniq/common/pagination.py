"""
Harmoniq Safety - List pagination
"""
import math
from typing import Dict, List

MAX_PER_PAGE = 100
DEFAULT_PER_PAGE = 25


def _to_int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def paginate(items: List, page=1, per_page=DEFAULT_PER_PAGE) -> Dict:
    page = max(_to_int(page, 1), 1)
    per_page = min(max(_to_int(per_page, DEFAULT_PER_PAGE), 1), MAX_PER_PAGE)
    total = len(items)
    pages = max(math.ceil(total / per_page), 1)
    start = (page - 1) * per_page
    return {
        "items": items[start:start + per_page],
        "total": total,
        "page": page,
        "per_page": per_page,
        "pages": pages,
    }
