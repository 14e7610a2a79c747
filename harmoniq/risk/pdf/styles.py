# ============================================================================
# Harmoniq Safety - Risk assessment PDF styles & HTML fragments
# ============================================================================
# Every form template shares one A4 stylesheet and the same header, section
# and signature fragments. All interpolated values go through _safe().
# ============================================================================

from html import escape as html_escape
from typing import Any, List, Optional, Sequence

BLANK = "________________"

_GRAY_50 = "#f5f5f5"
_GRAY_200 = "#e5e5e5"
_GRAY_500 = "#666666"
_INK = "#1a1a1a"

BASE_CSS = f"""
    @page {{ size: A4; margin: 30px; }}
    * {{ box-sizing: border-box; }}
    body {{
        font-family: Helvetica, Arial, sans-serif;
        font-size: 10px;
        color: {_INK};
        margin: 0;
    }}
    .header {{
        display: flex;
        justify-content: space-between;
        align-items: flex-start;
        border-bottom: 2px solid #000000;
        padding-bottom: 10px;
        margin-bottom: 16px;
    }}
    .header .logo {{ width: 80px; height: 40px; }}
    .header .logo img {{ max-width: 80px; max-height: 40px; }}
    .header-text {{ flex: 1; text-align: center; }}
    .company-name {{ font-size: 14px; font-weight: bold; margin-bottom: 2px; }}
    .title {{ font-size: 18px; font-weight: bold; margin: 2px 0; }}
    .subtitle {{ font-size: 10px; color: {_GRAY_500}; }}
    .form-number {{ font-size: 8px; color: #999999; text-align: right; }}
    .regulation-badge {{
        display: inline-block;
        margin-top: 4px;
        padding: 2px 8px;
        font-size: 8px;
        border: 1px solid {_INK};
        border-radius: 3px;
    }}
    .section {{ margin-bottom: 15px; }}
    .section-title {{
        font-size: 11px;
        font-weight: bold;
        background: {_GRAY_50};
        padding: 5px 8px;
        margin-bottom: 8px;
    }}
    .section-title.plain {{ background: transparent; padding: 0; }}
    .row {{ display: flex; margin-bottom: 4px; }}
    .label {{ width: 130px; font-weight: bold; }}
    .value {{ flex: 1; }}
    table {{ width: 100%; border-collapse: collapse; }}
    th {{
        background: {_INK};
        color: #ffffff;
        font-size: 9px;
        text-align: left;
        padding: 5px;
    }}
    td {{
        border-bottom: 1px solid {_GRAY_200};
        font-size: 9px;
        padding: 5px;
        vertical-align: top;
    }}
    td.small, th.small {{ width: 40px; text-align: center; }}
    .badge {{
        display: inline-block;
        padding: 2px 6px;
        border-radius: 3px;
        font-size: 8px;
        font-weight: bold;
    }}
    .note {{ font-size: 8px; color: {_GRAY_500}; margin-top: 4px; }}
    .box {{ border: 1px solid {_GRAY_200}; border-radius: 4px; margin-bottom: 8px; }}
    .box-header {{
        display: flex;
        justify-content: space-between;
        background: {_GRAY_50};
        padding: 6px 8px;
        font-weight: bold;
    }}
    .box-content {{ padding: 6px 8px; }}
    .grid {{ display: flex; flex-wrap: wrap; }}
    .grid-item {{ width: 25%; margin-bottom: 6px; }}
    .checkbox {{
        display: inline-block;
        width: 10px;
        height: 10px;
        border: 1px solid {_INK};
        margin-right: 6px;
        vertical-align: middle;
    }}
    .checkbox.checked {{ background: {_INK}; }}
    .summary {{
        display: flex;
        justify-content: space-around;
        background: {_GRAY_50};
        border-radius: 4px;
        padding: 12px;
        margin-bottom: 15px;
        text-align: center;
    }}
    .summary .number {{ font-size: 16px; font-weight: bold; }}
    .alert {{ background: #fef2f2; color: #991b1b; padding: 8px; margin-bottom: 6px; border-radius: 4px; }}
    .signatures {{ margin-top: 24px; }}
    .signature-row {{ display: flex; justify-content: space-between; }}
    .signature-block {{ width: 45%; }}
    .signature-line {{ border-bottom: 1px solid #000000; height: 30px; margin-bottom: 4px; }}
    .signature-label {{ font-size: 9px; color: {_GRAY_500}; }}
    .footer {{
        display: flex;
        justify-content: space-between;
        margin-top: 24px;
        padding-top: 8px;
        border-top: 1px solid {_GRAY_200};
        font-size: 8px;
        color: #999999;
    }}
"""


def _safe(val: Any) -> str:
    if val is None:
        return ""
    return html_escape(str(val))


def or_blank(val: Any) -> str:
    return _safe(val) if val not in (None, "") else BLANK


def header(company_name: str, title: str, subtitle: str, form_number: str,
           regulation: Optional[str] = None, logo_url: Optional[str] = None) -> str:
    logo = f'<img src="{_safe(logo_url)}" alt="">' if logo_url else ""
    badge = f'<div class="regulation-badge">{_safe(regulation)}</div>' if regulation else ""
    return (
        '<div class="header">\n'
        f'  <div class="logo">{logo}</div>\n'
        '  <div class="header-text">\n'
        f'    <div class="company-name">{_safe(company_name)}</div>\n'
        f'    <div class="title">{_safe(title)}</div>\n'
        f'    <div class="subtitle">{_safe(subtitle)}</div>\n'
        f'    {badge}\n'
        '  </div>\n'
        f'  <div class="logo form-number">{_safe(form_number)}</div>\n'
        '</div>\n'
    )


def section(title: str, body: str, plain: bool = False) -> str:
    css = "section-title plain" if plain else "section-title"
    return f'<div class="section"><div class="{css}">{_safe(title)}</div>{body}</div>\n'


def info_rows(pairs: Sequence) -> str:
    return "".join(
        f'<div class="row"><span class="label">{_safe(label)}</span>'
        f'<span class="value">{_safe(value)}</span></div>'
        for label, value in pairs
    )


def table(headers: Sequence[str], rows: List[Sequence[str]], small: Sequence[int] = ()) -> str:
    """Rows are pre-escaped HTML cells."""
    ths = "".join(
        f'<th class="small">{_safe(h)}</th>' if i in small else f"<th>{_safe(h)}</th>"
        for i, h in enumerate(headers)
    )
    trs = []
    for row in rows:
        tds = "".join(
            f'<td class="small">{cell}</td>' if i in small else f"<td>{cell}</td>"
            for i, cell in enumerate(row)
        )
        trs.append(f"<tr>{tds}</tr>")
    return f"<table><thead><tr>{ths}</tr></thead><tbody>{''.join(trs)}</tbody></table>"


def badge(text: str, background: str, color: str = "#1a1a1a") -> str:
    return f'<span class="badge" style="background:{background};color:{color}">{_safe(text)}</span>'


def signature_block(*lines: str) -> str:
    labels = "".join(f'<div class="signature-label">{line}</div>' for line in lines)
    return f'<div class="signature-block"><div class="signature-line"></div>{labels}</div>'


def signatures(title: str, left: str, right: str, extra: str = "", intro: str = "") -> str:
    intro_html = f'<p style="font-size:9px;line-height:1.4">{_safe(intro)}</p>' if intro else ""
    extra_html = f'<div class="signature-label" style="margin-top:16px">{extra}</div>' if extra else ""
    return (
        '<div class="signatures">'
        f'<div class="section-title plain">{_safe(title)}</div>'
        f'{intro_html}'
        f'<div class="signature-row">{left}{right}</div>'
        f'{extra_html}'
        '</div>\n'
    )


def footer(generated_label: str, generated: str, form_label: str, page_label: str) -> str:
    return (
        '<div class="footer">'
        f'<span>{_safe(generated_label)}: {_safe(generated)}</span>'
        f'<span>Harmoniq Safety • {_safe(form_label)}</span>'
        f'<span>{_safe(page_label)}</span>'
        '</div>\n'
    )


def document(title: str, lang: str, body: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        f'<html lang="{_safe(lang)}">\n'
        "<head>\n"
        '  <meta charset="utf-8">\n'
        f"  <title>{_safe(title)} - Harmoniq Safety</title>\n"
        f"  <style>{BASE_CSS}</style>\n"
        "</head>\n"
        "<body>\n"
        f"{body}"
        "</body>\n"
        "</html>"
    )
