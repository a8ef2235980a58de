from enum import Enum

from sqlalchemy import Column, String

from backpack.db.base import Base, BaseModel


class VerificationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not VerificationStatus.PENDING


class Visitor(Base, BaseModel):
    __tablename__ = "visitors"

    name = Column(String)
    phone = Column(String)
    email = Column(String)

    # Matched against locals.referral_code by value, no foreign key
    referral_code_used = Column(String, index=True)

    origin_city = Column(String)
    travel_date = Column(String)
    return_date = Column(String, nullable=True)

    # Generated name inside UPLOAD_DIR
    ticket_filename = Column(String)

    verification_status = Column(String, default=VerificationStatus.PENDING.value, nullable=False)

    def __repr__(self):
        return f"<Visitor {self.name} ({self.verification_status})>"
