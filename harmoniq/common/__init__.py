"""
Harmoniq Safety - shared helpers (date ranges, CSV, pagination, text).
"""
from .dates import DATE_RANGES, date_range_bounds, format_date_range, is_within_date_range
from .csvutil import rows_to_csv, sanitize_cell
from .numbers import round_half_up
from .pagination import paginate
from .text import detect_locale, is_valid_email, sanitize_text, strip_tags, validate_contact

__all__ = [
    "DATE_RANGES",
    "date_range_bounds",
    "detect_locale",
    "format_date_range",
    "is_valid_email",
    "is_within_date_range",
    "paginate",
    "round_half_up",
    "rows_to_csv",
    "sanitize_cell",
    "sanitize_text",
    "strip_tags",
    "validate_contact",
]
