"""
Pydantic schemas for NOC registration
Input validation and response shapes
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NocRegistrationForm(BaseModel):
    """
    Applicant fields of the registration form (multipart names as aliases).
    Values are kept exactly as submitted.
    """

    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(..., alias="fullName", min_length=1, max_length=200)
    email: str = Field(..., alias="email", min_length=1, max_length=200)
    phone: str = Field(..., alias="phone", min_length=1, max_length=50)
    company: str = Field(..., alias="company", min_length=1, max_length=200)
    designation: str = Field(..., alias="designation", min_length=1, max_length=200)
    purpose: str = Field(..., alias="purpose", min_length=1)
    valid_from: date = Field(..., alias="validFrom")
    valid_to: date = Field(..., alias="validTo")
    id_proof_type: str = Field(..., alias="idProofType", min_length=1, max_length=50)
    id_proof_number: str = Field(..., alias="idProofNumber", min_length=1, max_length=100)
    address: str = Field(..., alias="address", min_length=1)

    @field_validator(
        "full_name", "email", "phone", "company", "designation", "purpose",
        "id_proof_type", "id_proof_number", "address"
    )
    @classmethod
    def not_blank(cls, v: str) -> str:
        """Whitespace-only values count as missing"""
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class NocRegisterResponse(BaseModel):
    message: str
    nocId: str


class NocAcceptedResponse(NocRegisterResponse):
    status: str = "processing"


class NocOut(BaseModel):
    """Listing item"""
    nocNumber: str
    fullName: str
    email: str
    phone: str
    company: str
    designation: str
    purpose: str
    validFrom: Optional[str] = None
    validTo: Optional[str] = None
    idProofType: str
    idProofNumber: str
    address: str
    photoUrl: Optional[str] = None
    qrCodeUrl: Optional[str] = None
    pdfUrl: Optional[str] = None
    status: str
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class NocListResponse(BaseModel):
    message: str
    data: List[NocOut]
    pagination: Pagination
