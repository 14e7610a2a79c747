"""
Harmoniq Safety - Assets

Asset register, health scoring, inspections, downtime, corrective
actions, expiry alerts, QR labels and CSV/XLSX exchange.
"""
from .routes import register_asset_routes

__all__ = ["register_asset_routes"]
