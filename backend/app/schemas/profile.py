# app/schemas/profile.py
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.fields import OptionalText
from app.schemas.shared import Role, PatientIn, DoctorIn


class ProfileUpsertRequest(BaseModel):
    """Body of `profile.upsert`. Only the detail block matching `role` is stored."""

    model_config = ConfigDict(extra="ignore")

    role: Role
    name: OptionalText = None
    patient: Optional[PatientIn] = None
    doctor: Optional[DoctorIn] = None
