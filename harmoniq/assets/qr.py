"""
Harmoniq Safety - Asset QR labels
"""
import base64
import io
import zipfile
from html import escape as _h
from typing import Dict, List

import qrcode

QR_PREFIX = "HARMONIQ:ASSET:"


def qr_payload(asset: Dict) -> str:
    return f"{QR_PREFIX}{asset.get('qr_code') or asset.get('id')}"


def generate_qr_png(data: str, size: int = 300) -> bytes:
    """Generate a QR code as PNG bytes."""
    qr = qrcode.QRCode(version=1, error_correction=qrcode.constants.ERROR_CORRECT_M, box_size=10, border=2)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    img = img.resize((size, size))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def asset_qr_png(asset: Dict, size: int = 300) -> bytes:
    return generate_qr_png(qr_payload(asset), size=size)


def generate_batch_zip(assets: List[Dict]) -> bytes:
    """ZIP of one PNG per asset, named by asset tag."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for asset in assets:
            tag = asset.get("asset_tag") or f"asset-{asset.get('id', 'unknown')}"
            zf.writestr(f"{tag}.png", asset_qr_png(asset))
    return buf.getvalue()


def generate_print_sheet(assets: List[Dict]) -> str:
    """HTML print sheet with QR labels in a grid."""
    labels = ""
    for i, asset in enumerate(assets):
        b64 = base64.b64encode(asset_qr_png(asset, size=200)).decode("ascii")
        labels += f"""
        <div class="label">
            <img src="data:image/png;base64,{b64}" width="180" height="180" />
            <div class="tag">{_h(str(asset.get("asset_tag") or "?"))}</div>
            <div class="name">{_h(str(asset.get("name") or ""))}</div>
            <div class="loc">{_h(str(asset.get("location_name") or ""))}</div>
        </div>"""
        if (i + 1) % 3 == 0:
            labels += '<div style="clear:both;"></div>'

    return f"""<!DOCTYPE html>
<html><head>
<title>Asset QR Labels</title>
<style>
    @media print {{ body {{ margin: 0; }} @page {{ margin: 0.5in; }} }}
    body {{ font-family: Arial, sans-serif; background: #fff; padding: 16px; }}
    .label {{ display:inline-block; width:240px; margin:8px; padding:12px; border:1px solid #333;
              text-align:center; page-break-inside:avoid; }}
    .label img {{ display:block; margin:0 auto 8px; }}
    .tag {{ font-weight:bold; font-size:14px; }}
    .name {{ font-size:11px; color:#555; }}
    .loc {{ font-size:10px; color:#888; }}
</style>
</head><body>
<h2>Asset QR Labels</h2>
{labels}
</body></html>"""
