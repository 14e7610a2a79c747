"""
Harmoniq Safety - Asset CSV / XLSX import and export
"""
import csv
import datetime
import io
import logging
from typing import Dict, List

from ..common.csvutil import BOM, rows_to_csv
from ..errors import ValidationError
from ..stores import get_store
from .models import ASSET_DEFAULTS, _CHOICES, _next_asset_tag, new_asset_record

logger = logging.getLogger("harmoniq.assets.csv_io")

EXPORT_COLUMNS = [
    "name", "asset_tag", "serial_number", "category", "asset_type", "department",
    "status", "condition", "manufacturer", "model", "location_id",
    "purchase_date", "purchase_cost", "warranty_expiry",
]

IMPORT_COLUMNS = EXPORT_COLUMNS


def export_filename(ext: str = "csv", today: datetime.date = None) -> str:
    today = today or datetime.date.today()
    return f"assets-export-{today.isoformat()}.{ext}"


def export_assets_csv(assets: List[Dict]) -> str:
    if not assets:
        return BOM + ",".join(EXPORT_COLUMNS)
    return rows_to_csv(assets, headers=EXPORT_COLUMNS)


def export_assets_xlsx(assets: List[Dict]) -> bytes:
    """Asset register as a single-sheet workbook."""
    import openpyxl
    from openpyxl.styles import Font, PatternFill

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Assets"
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="1E40AF", end_color="1E40AF", fill_type="solid")

    ws.append(EXPORT_COLUMNS)
    for cell in ws[1]:
        cell.font = header_font
        cell.fill = header_fill
    for asset in assets:
        ws.append([asset.get(col) for col in EXPORT_COLUMNS])

    ws.column_dimensions["A"].width = 32
    ws.column_dimensions["B"].width = 14
    ws.freeze_panes = "A2"

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _parse_cost(value: str):
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def import_assets_csv(company_id: str, text: str, default_currency: str = "USD") -> Dict:
    """Create assets from CSV text. Returns {imported, skipped}."""
    text = text.lstrip(BOM).lstrip("\r\n")
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        raise ValidationError("No data rows found in CSV")

    physical = text.splitlines()
    reader = csv.reader(io.StringIO(text), strict=True)
    try:
        headers = [h.strip().lower() for h in next(reader)]
    except csv.Error as exc:
        raise ValidationError(f"Could not read CSV header: {exc}")
    store = get_store("assets")
    imported = 0
    skipped = 0

    while True:
        start = reader.line_num
        try:
            values = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            # An unterminated quote swallows every line up to the point of failure
            consumed = [line for line in physical[start:reader.line_num] if line.strip()]
            skipped += max(len(consumed), 1)
            logger.warning("CSV import for %s: bad row at line %d: %s", company_id, start + 1, exc)
            continue
        if not values:
            continue
        row = {h: (values[i].strip() if i < len(values) else "") for i, h in enumerate(headers)}
        if not row.get("name"):
            skipped += 1
            continue

        data = {col: row.get(col) or None for col in IMPORT_COLUMNS}
        data["purchase_cost"] = _parse_cost(row.get("purchase_cost"))
        for key, allowed in _CHOICES.items():
            if key in ASSET_DEFAULTS and data.get(key) not in allowed:
                data[key] = ASSET_DEFAULTS[key]

        record = new_asset_record(company_id, data, default_currency)
        if not record.get("asset_tag") or store.find(company_id, asset_tag=record["asset_tag"]):
            record["asset_tag"] = _next_asset_tag(company_id)
        store.add(record)
        imported += 1

    logger.info("CSV import for %s: %d imported, %d skipped", company_id, imported, skipped)
    return {"imported": imported, "skipped": skipped}
