import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backpack.core.errors import DuplicateCodeError, StorageError, VisitorNotFound
from backpack.models.local import Local
from backpack.models.visitor import VerificationStatus, Visitor

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Persistence for locals and visitors.

    Writes commit immediately and roll back before raising. Referral code
    uniqueness comes from the UNIQUE constraint on locals.referral_code: a
    colliding insert fails with DuplicateCodeError and the existing row is
    left untouched.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Locals
    # ------------------------------------------------------------------
    def insert_local(self, *, name, phone, email, pincode, referral_code) -> Local:
        local = Local(
            name=name,
            phone=phone,
            email=email,
            pincode=pincode,
            referral_code=referral_code,
        )
        self.db.add(local)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Referral code collision on insert: {referral_code}")
            raise DuplicateCodeError() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Local insert failed: {e}")
            raise StorageError(str(e)) from e

        self.db.refresh(local)
        return local

    def find_local_by_code(self, code: Optional[str]) -> Optional[Local]:
        """Exact, case-sensitive lookup"""
        if not code:
            return None
        try:
            return self.db.query(Local).filter(Local.referral_code == code).first()
        except SQLAlchemyError as e:
            logger.error(f"❌ Referral code lookup failed: {e}")
            raise StorageError(str(e)) from e

    def find_local_by_code_insensitive(self, code: Optional[str]) -> Optional[Local]:
        """Diagnostics only. Redemption always goes through find_local_by_code."""
        if not code:
            return None
        try:
            return (
                self.db.query(Local)
                .filter(func.upper(Local.referral_code) == func.upper(code))
                .first()
            )
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def find_locals_containing(self, fragment: Optional[str]) -> List[Local]:
        """Diagnostics only: codes containing the fragment (SQL LIKE, so case follows the backend)"""
        if not fragment:
            return []
        try:
            return (
                self.db.query(Local)
                .filter(Local.referral_code.contains(fragment, autoescape=True))
                .order_by(Local.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def list_locals(self) -> List[Local]:
        try:
            return self.db.query(Local).order_by(Local.created_at.desc(), Local.id.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"❌ Listing locals failed: {e}")
            raise StorageError(str(e)) from e

    def count_locals(self) -> int:
        try:
            return self.db.query(func.count(Local.id)).scalar() or 0
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    # ------------------------------------------------------------------
    # Visitors
    # ------------------------------------------------------------------
    def insert_visitor(
        self,
        *,
        name,
        phone,
        email,
        referral_code_used,
        origin_city,
        travel_date,
        ticket_filename,
        return_date=None,
    ) -> Visitor:
        visitor = Visitor(
            name=name,
            phone=phone,
            email=email,
            referral_code_used=referral_code_used,
            origin_city=origin_city,
            travel_date=travel_date,
            return_date=return_date or None,
            ticket_filename=ticket_filename,
            verification_status=VerificationStatus.PENDING.value,
        )
        self.db.add(visitor)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Visitor insert failed: {e}")
            raise StorageError(str(e)) from e

        self.db.refresh(visitor)
        return visitor

    def get_visitor(self, visitor_id: int) -> Optional[Visitor]:
        try:
            return self.db.query(Visitor).filter(Visitor.id == visitor_id).first()
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def list_visitors(self) -> List[Visitor]:
        try:
            return self.db.query(Visitor).order_by(Visitor.created_at.desc(), Visitor.id.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"❌ Listing visitors failed: {e}")
            raise StorageError(str(e)) from e

    def visitors_using_code(self, code: str) -> List[Visitor]:
        try:
            return (
                self.db.query(Visitor)
                .filter(Visitor.referral_code_used == code)
                .order_by(Visitor.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def update_visitor_status(self, visitor_id: int, status: VerificationStatus) -> Visitor:
        visitor = self.get_visitor(visitor_id)
        if visitor is None:
            raise VisitorNotFound(f"Visitor with ID {visitor_id} not found.")

        visitor.verification_status = VerificationStatus(status).value
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Status update failed for visitor {visitor_id}: {e}")
            raise StorageError(str(e)) from e

        self.db.refresh(visitor)
        return visitor
