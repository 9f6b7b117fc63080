"""
QR code rendering for short links.
"""

import base64
from io import BytesIO

import qrcode


def generate_qr_code(data: str) -> str:
    """
    Render `data` as a PNG QR code.

    Returns:
        A data URI (data:image/png;base64,...) ready for an <img> tag
    """
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffered = BytesIO()
    img.save(buffered, format="PNG")
    encoded = base64.b64encode(buffered.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{encoded}"
