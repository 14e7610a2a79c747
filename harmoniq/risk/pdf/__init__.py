"""
Harmoniq Safety - Risk assessment documents
"""
from .builder import FILE_PREFIXES, build_document, render_html
from .render import html_to_pdf, render_pdf

__all__ = ["FILE_PREFIXES", "build_document", "html_to_pdf", "render_html", "render_pdf"]
