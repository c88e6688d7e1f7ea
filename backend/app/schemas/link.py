# app/schemas/link.py
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.fields import OptionalText


class LinkSelectRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    doctor_id: OptionalText = None       # sent by patients
    patient_email: OptionalText = None   # sent by doctors


class LinkedDoctor(BaseModel):
    id: str
    name: Optional[str] = None
    speciality: Optional[str] = None


class LinkedPatient(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class DoctorDirectoryEntry(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    speciality: Optional[str] = None
    languages_spoken: Optional[str] = None
