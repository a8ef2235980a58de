from sqlalchemy import Column, String

from backpack.db.base import Base, BaseModel


class Local(Base, BaseModel):
    __tablename__ = "locals"

    name = Column(String)
    phone = Column(String)
    email = Column(String)
    pincode = Column(String(6))

    # Enforced by the database, never pre-checked
    referral_code = Column(String, unique=True, nullable=False)

    def __repr__(self):
        return f"<Local {self.name} ({self.referral_code})>"
