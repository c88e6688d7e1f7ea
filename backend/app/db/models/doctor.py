# app/db/models/doctor.py
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base

class DoctorModel(Base):
    __tablename__ = "doctor_profiles"

    user_id    = Column(String(64),
                        ForeignKey("accounts.id", ondelete="CASCADE"),
                        primary_key=True)

    gender                 = Column(String(30))
    age                    = Column(Integer)
    nationality            = Column(String(80))
    level_of_education     = Column(String(120))
    medical_school         = Column(String(200))
    year_of_education      = Column(Integer)
    medical_license_number = Column(String(80))
    license_region         = Column(String(120))
    speciality             = Column(String(120))
    years_of_experience    = Column(Integer)
    current_workplace      = Column(String(200))
    languages_spoken       = Column(String(200))

    account = relationship("AccountModel", back_populates="doctor_profile")
