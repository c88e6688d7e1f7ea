# app/schemas/shared.py
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict

from app.schemas.fields import OptionalInt, OptionalFloat, OptionalText


class Role(str, Enum):
    doctor = "doctor"
    patient = "patient"


class PatientIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    age: OptionalInt = None
    weight: OptionalFloat = None
    height: OptionalFloat = None
    gender: OptionalText = None
    nationality: OptionalText = None
    medical_history: OptionalText = None
    current_medications: OptionalText = None
    allergies: OptionalText = None
    family_history: OptionalText = None
    lifestyle_factors: OptionalText = None


class DoctorIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    gender: OptionalText = None
    age: OptionalInt = None
    nationality: OptionalText = None
    level_of_education: OptionalText = None
    medical_school: OptionalText = None
    year_of_education: OptionalInt = None
    medical_license_number: OptionalText = None
    license_region: OptionalText = None
    speciality: OptionalText = None
    years_of_experience: OptionalInt = None
    current_workplace: OptionalText = None
    languages_spoken: OptionalText = None


class PatientOut(PatientIn):
    model_config = ConfigDict(from_attributes=True)

    user_id: str


class DoctorOut(DoctorIn):
    model_config = ConfigDict(from_attributes=True)

    user_id: str


class AccountOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: Optional[str] = None
    role: Role
    created_at: Optional[datetime] = None
