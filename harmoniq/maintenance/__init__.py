"""
Harmoniq Safety - Maintenance
"""
from .routes import register_maintenance_routes

__all__ = ["register_maintenance_routes"]
