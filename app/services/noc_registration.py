"""
NOC registration pipeline
app/services/noc_registration.py

received → identifier-assigned → photo-stored → qr-generated → qr-stored
→ record-created → certificate-rendered → certificate-stored → record-finalized

Strictly linear. A failure aborts the request and leaves whatever was
already written (photo, QR, draft record) in place; nothing is rolled back.
"""

import enum
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.config import settings
from app.database import DatabaseSession
from app.models import NocCertificate
from app.schemas.noc import NocRegistrationForm
from app.services.noc_store import NocRecordStore
from app.services.pdf_generator import generate_noc_pdf
from app.services.qr_generator import build_verification_url, generate_qr_code
from app.services.storage import AssetStore, PHOTOS, QRCODES, PDFS
from app.utils import generate_noc_number

logger = logging.getLogger(__name__)


class RegistrationStage(str, enum.Enum):
    RECEIVED = "received"
    IDENTIFIER_ASSIGNED = "identifier-assigned"
    PHOTO_STORED = "photo-stored"
    QR_GENERATED = "qr-generated"
    QR_STORED = "qr-stored"
    RECORD_CREATED = "record-created"
    CERTIFICATE_RENDERED = "certificate-rendered"
    CERTIFICATE_STORED = "certificate-stored"
    RECORD_FINALIZED = "record-finalized"


class RegistrationError(Exception):
    """Pipeline aborted; `stage` is the last stage that completed."""

    def __init__(self, noc_number: str, stage: RegistrationStage):
        super().__init__(f"Registration of {noc_number} aborted after stage '{stage.value}'")
        self.noc_number = noc_number
        self.stage = stage


@dataclass
class PhotoUpload:
    content: bytes
    filename: str
    content_type: str


class NocRegistrationService:
    """
    Issues a certificate: stores the photo, encodes the QR, persists the
    record, renders the PDF and attaches its location to the record.
    """

    def __init__(self, db: Session, store: AssetStore, timezone_name: str = None):
        self.records = NocRecordStore(db)
        self.store = store
        self.timezone_name = timezone_name or settings.certificate_timezone

    def register(self, form: NocRegistrationForm, photo: PhotoUpload, verify_base_url: str) -> NocCertificate:
        """Full synchronous pipeline; returns the finalized record."""
        noc_number = generate_noc_number()
        return self.complete(noc_number, form, photo, verify_base_url)

    def complete(
        self,
        noc_number: str,
        form: NocRegistrationForm,
        photo: PhotoUpload,
        verify_base_url: str
    ) -> NocCertificate:
        """Runs every stage after the certificate number is known."""
        stage = RegistrationStage.IDENTIFIER_ASSIGNED
        logger.info(f"🆕 Registering {noc_number} for {form.full_name}")

        try:
            photo_url = self.store.store(PHOTOS, photo.content, photo.content_type)
            stage = self._advance(noc_number, RegistrationStage.PHOTO_STORED)

            qr_bytes = generate_qr_code(build_verification_url(verify_base_url, noc_number))
            stage = self._advance(noc_number, RegistrationStage.QR_GENERATED)

            qr_code_url = self.store.store(QRCODES, qr_bytes, "image/png")
            stage = self._advance(noc_number, RegistrationStage.QR_STORED)

            noc = self.records.create(NocCertificate(
                noc_number=noc_number,
                photo_url=photo_url,
                qr_code_url=qr_code_url,
                **form.model_dump()
            ))
            stage = self._advance(noc_number, RegistrationStage.RECORD_CREATED)

            pdf_bytes = generate_noc_pdf(noc, photo.content, qr_bytes, self.timezone_name)
            stage = self._advance(noc_number, RegistrationStage.CERTIFICATE_RENDERED)

            pdf_url = self.store.store(PDFS, pdf_bytes, "application/pdf", filename=f"{noc_number}.pdf")
            stage = self._advance(noc_number, RegistrationStage.CERTIFICATE_STORED)

            noc = self.records.update(noc_number, pdf_url=pdf_url)
            self._advance(noc_number, RegistrationStage.RECORD_FINALIZED)
        except Exception as e:
            logger.error(f"❌ {noc_number}: failed after '{stage.value}': {e}")
            raise RegistrationError(noc_number, stage) from e

        logger.info(f"✅ {noc_number} issued")
        return noc

    @staticmethod
    def _advance(noc_number: str, stage: RegistrationStage) -> RegistrationStage:
        logger.debug(f"{noc_number}: {stage.value}")
        return stage


def complete_registration_in_background(
    noc_number: str,
    form: NocRegistrationForm,
    photo: PhotoUpload,
    verify_base_url: str,
    store: AssetStore
):
    """
    Continuation of a fast-acknowledged registration.

    Runs after the 202 response has been sent, with its own session. The
    caller never learns about a failure here; it is only logged.
    """
    try:
        with DatabaseSession() as db:
            NocRegistrationService(db, store).complete(noc_number, form, photo, verify_base_url)
    except Exception:
        logger.exception(f"❌ Background registration of {noc_number} failed")
