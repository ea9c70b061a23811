"""
Persistence for NOC certificates
app/services/noc_store.py
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import NocCertificate

logger = logging.getLogger(__name__)


class DuplicateNocNumberError(Exception):
    """A certificate with the same number already exists."""


class NocNotFoundError(Exception):
    """No certificate with the requested number."""


class NocRecordStore:
    """
    Record store for NocCertificate rows

    Every write commits immediately; there is no unit of work spanning
    several calls.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, noc: NocCertificate) -> NocCertificate:
        self.db.add(noc)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateNocNumberError(noc.noc_number) from e

        self.db.refresh(noc)
        return noc

    def update(self, noc_number: str, **fields) -> NocCertificate:
        noc = self.find_by_number(noc_number)
        if noc is None:
            raise NocNotFoundError(noc_number)

        for name, value in fields.items():
            setattr(noc, name, value)

        self.db.commit()
        self.db.refresh(noc)
        return noc

    def find_by_number(self, noc_number: str) -> Optional[NocCertificate]:
        return self.db.query(NocCertificate)\
            .filter(NocCertificate.noc_number == noc_number)\
            .first()

    def list(self, page: int, page_size: int) -> Tuple[List[NocCertificate], int]:
        """Newest first, with the total row count."""
        total = self.db.query(NocCertificate).count()

        records = self.db.query(NocCertificate)\
            .order_by(NocCertificate.created_at.desc(), NocCertificate.id.desc())\
            .offset((page - 1) * page_size)\
            .limit(page_size)\
            .all()

        return records, total
