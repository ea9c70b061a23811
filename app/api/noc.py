"""
NOC Registry - certificate endpoints
app/api/noc.py

- Register a NOC (synchronous or fast-acknowledge)
- QR code and PDF retrieval
- Paginated listing
"""

import logging
import math
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.schemas.noc import (
    NocAcceptedResponse,
    NocListResponse,
    NocRegisterResponse,
    NocRegistrationForm,
)
from app.services.noc_registration import (
    NocRegistrationService,
    PhotoUpload,
    complete_registration_in_background,
)
from app.services.noc_store import NocRecordStore
from app.services.storage import AssetStore, get_asset_store
from app.utils import generate_noc_number

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

SERVER_ERROR = "Server error. Please try again."


# ============================================================================
# HELPERS
# ============================================================================

def verification_base_url(request: Request) -> str:
    """scheme://host the QR link points back to"""
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")
    return f"{request.url.scheme}://{request.url.netloc}"


def parse_positive_int(value: Optional[str], default: int) -> int:
    """Query values that are missing, malformed or below 1 fall back to the default."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


async def read_photo(photo: Optional[UploadFile]) -> PhotoUpload:
    """
    Validates the uploaded photo: present, an image, within the size limit.
    """
    if photo is None or not photo.filename:
        raise HTTPException(status_code=400, detail="Photo is required")

    content_type = photo.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="File upload error: Only image files are allowed!")

    content = await photo.read()
    if not content:
        raise HTTPException(status_code=400, detail="Photo is required")

    if len(content) > settings.max_image_size_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File upload error: File too large (max {settings.max_image_size_mb}MB)"
        )

    return PhotoUpload(content=content, filename=photo.filename, content_type=content_type)


def validate_form(fields: dict) -> NocRegistrationForm:
    try:
        return NocRegistrationForm(**{k: v for k, v in fields.items() if v is not None})
    except ValidationError as e:
        invalid = sorted({str(err["loc"][0]) for err in e.errors()})
        raise HTTPException(
            status_code=400,
            detail=f"Missing or invalid fields: {', '.join(invalid)}"
        )


def serve_asset(store: AssetStore, location: Optional[str], media_type: str):
    """Local files are streamed back; remote objects are redirected to."""
    if not location:
        raise HTTPException(status_code=404, detail="File not available yet")

    file_path = store.local_path(location)
    if file_path is None:
        if location.startswith(("http://", "https://")):
            return RedirectResponse(url=location)
        raise HTTPException(status_code=404, detail="File not found")

    if not file_path.is_file():
        raise HTTPException(status_code=404, detail="File not found")

    return FileResponse(file_path, media_type=media_type)


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post(
    "/register",
    status_code=201,
    response_model=NocRegisterResponse,
    responses={202: {"model": NocAcceptedResponse}}
)
async def register_noc(
    request: Request,
    background_tasks: BackgroundTasks,
    full_name: Optional[str] = Form(None, alias="fullName"),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    company: Optional[str] = Form(None),
    designation: Optional[str] = Form(None),
    purpose: Optional[str] = Form(None),
    valid_from: Optional[str] = Form(None, alias="validFrom"),
    valid_to: Optional[str] = Form(None, alias="validTo"),
    id_proof_type: Optional[str] = Form(None, alias="idProofType"),
    id_proof_number: Optional[str] = Form(None, alias="idProofNumber"),
    address: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    store: AssetStore = Depends(get_asset_store)
):
    """
    Registers a NOC.

    Validation happens before any side effect. In fast_ack mode the number
    is returned with 202 and the assets are generated after the response.
    """

    # ====================================================================
    # 1. VALIDATION
    # ====================================================================

    photo_upload = await read_photo(photo)
    form = validate_form({
        "fullName": full_name,
        "email": email,
        "phone": phone,
        "company": company,
        "designation": designation,
        "purpose": purpose,
        "validFrom": valid_from,
        "validTo": valid_to,
        "idProofType": id_proof_type,
        "idProofNumber": id_proof_number,
        "address": address,
    })

    base_url = verification_base_url(request)

    # ====================================================================
    # 2a. FAST ACKNOWLEDGE
    # ====================================================================

    if settings.registration_mode == "fast_ack":
        noc_number = generate_noc_number()
        background_tasks.add_task(
            complete_registration_in_background,
            noc_number,
            form,
            photo_upload,
            base_url,
            store
        )
        logger.info(f"📨 {noc_number} accepted, generating assets in background")

        return JSONResponse(
            status_code=202,
            content=NocAcceptedResponse(
                message="NOC registration received",
                nocId=noc_number
            ).model_dump()
        )

    # ====================================================================
    # 2b. SYNCHRONOUS PIPELINE
    # ====================================================================

    try:
        noc = NocRegistrationService(db, store).register(form, photo_upload, base_url)
    except Exception:
        logger.exception("Error registering NOC")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    return NocRegisterResponse(message="NOC registered successfully", nocId=noc.noc_number)


@router.get("/qr/{noc_id}")
async def get_qr_code(
    noc_id: str,
    db: Session = Depends(get_db),
    store: AssetStore = Depends(get_asset_store)
):
    """Serves (or redirects to) the QR image of a certificate"""
    noc = NocRecordStore(db).find_by_number(noc_id)

    if not noc:
        raise HTTPException(status_code=404, detail="NOC not found")

    return serve_asset(store, noc.qr_code_url, "image/png")


@router.get("/pdf/{noc_id}")
async def download_pdf(
    noc_id: str,
    db: Session = Depends(get_db),
    store: AssetStore = Depends(get_asset_store)
):
    """Serves (or redirects to) the certificate PDF"""
    noc = NocRecordStore(db).find_by_number(noc_id)

    if not noc:
        raise HTTPException(status_code=404, detail="NOC not found")

    return serve_asset(store, noc.pdf_url, "application/pdf")


@router.get("/all", response_model=NocListResponse)
async def get_all_nocs(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Paginated listing, newest first
    """
    page_number = parse_positive_int(page, DEFAULT_PAGE)
    page_size = min(parse_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT)

    try:
        records, total = NocRecordStore(db).list(page_number, page_size)
    except Exception:
        logger.exception("Error fetching NOC details")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    return {
        "message": "NOC details fetched successfully",
        "data": [noc.to_dict() for noc in records],
        "pagination": {
            "page": page_number,
            "limit": page_size,
            "total": total,
            "totalPages": math.ceil(total / page_size)
        }
    }
