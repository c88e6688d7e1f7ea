# app/db/models/link.py
from sqlalchemy import (
    Column,
    Integer,
    Boolean,
    DateTime,
    String,
    ForeignKey,
    UniqueConstraint,
    false,
)
from app.db.base import Base
from sqlalchemy.sql import func


class DoctorPatientLinkModel(Base):
    __tablename__ = "doctor_patient_links"

    id = Column(Integer, primary_key=True)
    patient_id = Column(
        String(64), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    doctor_id = Column(
        String(64), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # each flag is only ever set by its own party, and never cleared
    patient_consented = Column(Boolean, nullable=False, default=False, server_default=false())
    doctor_consented = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("patient_id", "doctor_id", name="uq_links_patient_doctor"),
    )

    @property
    def is_mutual(self) -> bool:
        return bool(self.patient_consented and self.doctor_consented)
