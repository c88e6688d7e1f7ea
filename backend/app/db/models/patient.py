# app/db/models/patient.py
from sqlalchemy import Column, Integer, String, Float, Text, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base

class PatientModel(Base):
    __tablename__ = "patient_profiles"

    user_id    = Column(String(64),
                        ForeignKey("accounts.id", ondelete="CASCADE"),
                        primary_key=True)

    age                 = Column(Integer)
    weight              = Column(Float)
    height              = Column(Float)
    gender              = Column(String(30))
    nationality         = Column(String(80))
    medical_history     = Column(Text)
    current_medications = Column(Text)
    allergies           = Column(Text)
    family_history      = Column(Text)
    lifestyle_factors   = Column(Text)

    account = relationship("AccountModel", back_populates="patient_profile")
