"""
Harmoniq Safety - Checklists
"""
from .routes import register_checklist_routes

__all__ = ["register_checklist_routes"]
