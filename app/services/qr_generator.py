"""
QR code generation for certificate verification
"""

from io import BytesIO

import qrcode


def build_verification_url(base_url: str, noc_number: str) -> str:
    """Link encoded in the QR: points at the certificate download."""
    return f"{base_url.rstrip('/')}/api/noc/pdf/{noc_number}"


def generate_qr_code(url: str, box_size: int = 10, border: int = 2) -> bytes:
    """
    Encodes the URL as a QR code.

    Returns: PNG bytes
    """
    qr = qrcode.QRCode(
        version=None,  # smallest version that fits the data
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(url)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
