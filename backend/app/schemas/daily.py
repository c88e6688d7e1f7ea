# app/schemas/daily.py
import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.schemas.fields import CountInt, CountFloat, OptionalInt, OptionalFloat


class _DailyIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # None means "today" for the caller
    date: Optional[dt.date] = None

    @field_validator("date", mode="before")
    @classmethod
    def _empty_date(cls, value):
        if value == "":
            return None
        return value


class HabitIn(_DailyIn):
    steps: CountInt = 0
    water_cups: CountInt = 0
    sleep_hours: CountFloat = 0.0


class VitalIn(_DailyIn):
    blood_glucose: OptionalInt = None
    blood_pressure_sys: OptionalInt = None
    blood_pressure_dia: OptionalInt = None
    heart_rate: OptionalInt = None
    body_temperature: OptionalFloat = None


class HabitOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    steps: int
    water_cups: int
    sleep_hours: float


class VitalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    blood_glucose: Optional[int] = None
    blood_pressure_sys: Optional[int] = None
    blood_pressure_dia: Optional[int] = None
    heart_rate: Optional[int] = None
    body_temperature: Optional[float] = None
