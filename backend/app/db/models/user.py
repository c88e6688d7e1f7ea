# app/db/models/user.py
from sqlalchemy import Column, String, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from app.db.base import Base


class AccountModel(Base):
    __tablename__ = "accounts"

    # id comes from the identity provider (the token's "sub" claim)
    id = Column(String(64), primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String(120))
    role = Column(String(10), nullable=False)  # 'patient' or 'doctor'
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("role in ('patient', 'doctor')", name="ck_accounts_role"),
    )

    # one-to-one links
    patient_profile = relationship(
        "PatientModel",
        back_populates="account",
        uselist=False,
        cascade="all, delete-orphan",
    )
    doctor_profile = relationship(
        "DoctorModel",
        back_populates="account",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<AccountModel(id={self.id}, role={self.role})>"
