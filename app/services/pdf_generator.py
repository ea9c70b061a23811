"""
NOC certificate PDF generator
app/services/pdf_generator.py
"""

from io import BytesIO
from datetime import datetime

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
import pytz

ID_PROOF_TYPE_LABELS = {
    "aadhar": "Aadhar Card",
    "pan": "PAN Card",
    "passport": "Passport",
    "driving": "Driving License",
    "voter": "Voter ID",
}

MARGIN = 50
PHOTO_WIDTH = 100
QR_WIDTH = 150


def get_id_proof_type_label(id_proof_type: str) -> str:
    """Human label for an ID proof key; unknown keys are returned as-is."""
    return ID_PROOF_TYPE_LABELS.get(id_proof_type, id_proof_type)


def format_locale_date(value) -> str:
    """M/D/YYYY, as an en-US locale date."""
    if value is None:
        return ""
    return f"{value.month}/{value.day}/{value.year}"


def issued_on_date(created_at: datetime, timezone_name: str = "UTC"):
    """Issue date of the certificate in the configured timezone."""
    if created_at is None:
        created_at = datetime.now(pytz.utc)
    if created_at.tzinfo is None:
        # SQLite hands back naive UTC timestamps
        created_at = pytz.utc.localize(created_at)
    return created_at.astimezone(pytz.timezone(timezone_name)).date()


def certificate_details(noc, timezone_name: str = "UTC") -> list:
    """
    Ordered (label, value) pairs printed on the certificate.
    """
    return [
        ("Full Name", noc.full_name),
        ("Email", noc.email),
        ("Phone", noc.phone),
        ("Company/Organization", noc.company),
        ("Designation", noc.designation),
        ("ID Type", get_id_proof_type_label(noc.id_proof_type)),
        ("ID Number", noc.id_proof_number),
        ("Address", noc.address),
        ("Purpose", noc.purpose),
        ("Valid From", format_locale_date(noc.valid_from)),
        ("Valid To", format_locale_date(noc.valid_to)),
        ("Issued On", format_locale_date(issued_on_date(noc.created_at, timezone_name))),
    ]


def generate_noc_pdf(
    noc,
    photo_bytes: bytes,
    qr_bytes: bytes,
    timezone_name: str = "UTC",
    compress: bool = True
) -> bytes:
    """
    Renders the certificate for a NOC record.

    The whole document is built in memory and returned as one buffer.
    Image decoding errors propagate to the caller.
    """

    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4, pageCompression=1 if compress else 0)
    c.setTitle(f"No Objection Certificate {noc.noc_number}")
    width, height = A4  # 595 x 842 points

    y = height - MARGIN

    def ensure_space(needed):
        nonlocal y
        if y - needed < MARGIN:
            c.showPage()
            y = height - MARGIN

    # ========================================================================
    # HEADER
    # ========================================================================

    c.setFont("Helvetica-Bold", 18)
    c.drawCentredString(width / 2, y - 18, "NO OBJECTION CERTIFICATE")
    y -= 44

    c.setFont("Helvetica", 14)
    c.drawCentredString(width / 2, y - 14, f"Certificate Number: {noc.noc_number}")
    y -= 44

    # ========================================================================
    # PHOTO (right-aligned, fixed width)
    # ========================================================================

    photo = ImageReader(BytesIO(photo_bytes))
    photo_w, photo_h = photo.getSize()
    photo_height = PHOTO_WIDTH * photo_h / photo_w

    ensure_space(photo_height)
    c.drawImage(
        photo,
        width - MARGIN - PHOTO_WIDTH,
        y - photo_height,
        width=PHOTO_WIDTH,
        height=photo_height,
        mask="auto"
    )
    y -= photo_height + 20

    # ========================================================================
    # DETAILS
    # ========================================================================

    c.setFont("Helvetica", 12)
    for label, value in certificate_details(noc, timezone_name):
        ensure_space(18)
        c.setFont("Helvetica", 12)
        c.drawString(MARGIN, y - 12, f"{label}: {value}")
        y -= 18

    # ========================================================================
    # QR
    # ========================================================================

    y -= 20
    ensure_space(QR_WIDTH + 24)
    c.setFont("Helvetica", 12)
    c.drawCentredString(width / 2, y - 12, "Scan to verify this certificate:")
    y -= 24

    qr = ImageReader(BytesIO(qr_bytes))
    c.drawImage(qr, (width - QR_WIDTH) / 2, y - QR_WIDTH, width=QR_WIDTH, height=QR_WIDTH)
    y -= QR_WIDTH + 20

    # ========================================================================
    # FOOTER
    # ========================================================================

    ensure_space(30)
    c.setFont("Helvetica", 10)
    c.drawCentredString(width / 2, y - 10, "This is an electronically generated certificate.")
    c.drawCentredString(width / 2, y - 24, "No signature is required.")

    c.showPage()
    c.save()

    return buffer.getvalue()
