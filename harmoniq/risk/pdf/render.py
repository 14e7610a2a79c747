"""
Harmoniq Safety - HTML to PDF through WeasyPrint
"""
import logging
from typing import Dict, Tuple

from ...errors import RenderError
from .builder import render_html

logger = logging.getLogger("harmoniq.risk.pdf")


def html_to_pdf(html: str) -> bytes:
    """Convert an HTML string to PDF bytes.

    Raises RenderError when WeasyPrint (or one of its system libraries) is
    unavailable or the conversion fails.
    """
    try:
        from weasyprint import HTML as WeasyprintHTML  # type: ignore
    except (ImportError, OSError):
        logger.error("WeasyPrint is not available. Install with: pip install weasyprint")
        raise RenderError("PDF rendering is not available on this server")

    try:
        return WeasyprintHTML(string=html).write_pdf()
    except Exception as exc:
        logger.exception("PDF render failed")
        raise RenderError(f"PDF render failed: {exc}")


def render_pdf(evaluation: Dict, company: Dict) -> Tuple[bytes, str]:
    """Return (pdf bytes, filename) for an evaluation."""
    html, filename = render_html(evaluation, company)
    pdf = html_to_pdf(html)
    logger.info("Rendered %s (%d bytes)", filename, len(pdf))
    return pdf, filename
