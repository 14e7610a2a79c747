"""
Harmoniq Safety - multi-tenant workplace safety and asset management backend.
"""

__version__ = "1.4.0"
