"""
NOC certificate model
One row per issued No Objection Certificate
"""

import enum

from sqlalchemy import Column, Integer, String, Date, DateTime, Text
from sqlalchemy.sql import func

from app.database import Base


class NocStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


class NocCertificate(Base):
    """
    Issued certificate with applicant details and asset locations.

    photo_url and qr_code_url are known when the row is inserted;
    pdf_url is attached by a second write once the document is rendered.
    """

    __tablename__ = "noc_certificates"

    id = Column(Integer, primary_key=True, index=True)

    # Format: NOC-YY-MM-DD-XXXXXX
    noc_number = Column(String(32), unique=True, nullable=False, index=True)

    # Applicant
    full_name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=False)
    company = Column(String(200), nullable=False)
    designation = Column(String(200), nullable=False)
    purpose = Column(Text, nullable=False)
    valid_from = Column(Date, nullable=False)
    valid_to = Column(Date, nullable=False)
    id_proof_type = Column(String(50), nullable=False)
    id_proof_number = Column(String(100), nullable=False)
    address = Column(Text, nullable=False)

    # Stored assets
    photo_url = Column(String(500))
    qr_code_url = Column(String(500))
    pdf_url = Column(String(500))

    status = Column(String(20), nullable=False, default=NocStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<NocCertificate(noc_number='{self.noc_number}', full_name='{self.full_name}')>"

    def to_dict(self) -> dict:
        """Wire representation used by the listing endpoint"""
        return {
            "nocNumber": self.noc_number,
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "company": self.company,
            "designation": self.designation,
            "purpose": self.purpose,
            "validFrom": self.valid_from.isoformat() if self.valid_from else None,
            "validTo": self.valid_to.isoformat() if self.valid_to else None,
            "idProofType": self.id_proof_type,
            "idProofNumber": self.id_proof_number,
            "address": self.address,
            "photoUrl": self.photo_url,
            "qrCodeUrl": self.qr_code_url,
            "pdfUrl": self.pdf_url,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None
        }
