"""Shared fixtures: throwaway SQLite database, local asset store, test photos."""

from __future__ import annotations

from datetime import date
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app.database import SessionLocal, configure_engine, dispose_engine, init_db
from app.main import app
from app.schemas.noc import NocRegistrationForm
from app.services.noc_registration import PhotoUpload
from app.services.storage import LocalAssetStore, get_asset_store

VALID_FORM = {
    "fullName": "Jane Doe",
    "email": "jane@x.com",
    "phone": "555-0100",
    "company": "Acme Corp",
    "designation": "Site Engineer",
    "purpose": "Plant inspection",
    "validFrom": "2025-01-01",
    "validTo": "2025-12-31",
    "idProofType": "aadhar",
    "idProofNumber": "1234-5678-9012",
    "address": "12 Main Street, Pune",
}


def make_png(width: int = 60, height: int = 80, color=(200, 120, 40)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def db_engine(tmp_path):
    engine = configure_engine(f"sqlite:///{tmp_path / 'noc.db'}")
    init_db()
    yield engine
    dispose_engine()


@pytest.fixture
def db(db_engine):
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def asset_store(upload_dir):
    return LocalAssetStore(str(upload_dir))


@pytest.fixture
def photo_bytes():
    return make_png()


@pytest.fixture
def photo(photo_bytes):
    return PhotoUpload(content=photo_bytes, filename="jane.png", content_type="image/png")


@pytest.fixture
def form():
    return NocRegistrationForm(**VALID_FORM)


@pytest.fixture
def noc_fields():
    """Model-level applicant fields for inserting rows directly."""
    return {
        "full_name": "Jane Doe",
        "email": "jane@x.com",
        "phone": "555-0100",
        "company": "Acme Corp",
        "designation": "Site Engineer",
        "purpose": "Plant inspection",
        "valid_from": date(2025, 1, 1),
        "valid_to": date(2025, 12, 31),
        "id_proof_type": "aadhar",
        "id_proof_number": "1234-5678-9012",
        "address": "12 Main Street, Pune",
    }


@pytest.fixture
def client(db_engine, asset_store):
    app.dependency_overrides[get_asset_store] = lambda: asset_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client, photo_bytes):
    """POST a registration with optional field overrides / photo."""

    def _register(photo=("jane.png", photo_bytes, "image/png"), **overrides):
        data = {**VALID_FORM, **overrides}
        data = {k: v for k, v in data.items() if v is not None}
        files = {"photo": photo} if photo is not None else None
        return client.post("/api/noc/register", data=data, files=files)

    return _register
