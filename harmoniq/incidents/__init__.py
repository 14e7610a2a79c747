"""
Harmoniq Safety - Incidents
"""
from .routes import register_incident_routes

__all__ = ["register_incident_routes"]
