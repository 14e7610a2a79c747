"""
Harmoniq Safety - Risk assessments

Regulatory risk forms (US JHA/JSA, NL RI&E/Arbowet, SE SAM/OSA), their
scoring heuristics and printable documents.
"""
from .routes import register_risk_routes

__all__ = ["register_risk_routes"]
