# app/routes/health/services.py
"""
One coroutine per API action.

Each handler receives the caller (claims from the bearer token), the query
parameters and the parsed JSON body, and returns the response payload.
"""
import logging
from datetime import datetime, timezone, date
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.core.access import authorize_target
from app.core.errors import BadRequestError, ForbiddenError, MissingFieldError, NotFoundError
from app.db.crud import daily as daily_crud
from app.db.crud import link as link_crud
from app.db.crud.doctor import list_doctors
from app.db.crud.user import get_account, get_account_by_email, upsert_profile
from app.schemas.daily import HabitIn, VitalIn, HabitOut, VitalOut
from app.schemas.link import LinkSelectRequest
from app.schemas.profile import ProfileUpsertRequest
from app.schemas.shared import AccountOut, PatientOut, DoctorOut, Role
from app.schemas.fields import to_int

logger = logging.getLogger(__name__)

Payload = Dict[str, Any]
M = TypeVar("M", bound=BaseModel)


def today() -> date:
    """The server's current calendar date (UTC)."""
    return datetime.now(timezone.utc).date()


def parse_body(model: Type[M], body: Payload) -> M:
    """Validate a request body, turning the first error into a field-named 400."""
    try:
        return model.model_validate(body)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "body"
        if error["type"] == "missing":
            raise MissingFieldError(field)
        raise BadRequestError(f"{field}: {error['msg']}")


def range_days(params: Payload) -> int:
    days = to_int(params.get("rangeDays"))
    if days is None or days < 1:
        return settings.default_range_days
    return days


def account_out(account) -> Optional[Payload]:
    if account is None:
        return None
    return AccountOut.model_validate(account).model_dump(mode="json")


async def _target_for_read(db: AsyncSession, user: Payload, target_id: Optional[str]) -> str:
    """Resolve the account a read acts on and check the caller may see it."""
    caller_id = user["user_id"]
    target_id = target_id or caller_id
    if target_id != caller_id:
        caller = await get_account(db, caller_id)
        await authorize_target(db, caller_id, caller, target_id)
    return target_id


# ---------------------------------------------------------------- profiles ----
async def me(db: AsyncSession, user: Payload, params: Payload, body: Payload) -> Payload:
    account = await get_account(db, user["user_id"])
    return {"profile": account_out(account)}


async def get_profile(db: AsyncSession, user: Payload, params: Payload, body: Payload) -> Payload:
    target_id = params.get("user_id")
    if not target_id:
        raise MissingFieldError("user_id")
    await _target_for_read(db, user, target_id)

    account = await get_account(db, target_id)
    if account is None:
        raise NotFoundError("Not found")

    response = {"profile": account_out(account)}
    if account.role == Role.patient.value:
        detail = account.patient_profile
        response["patient"] = (
            PatientOut.model_validate(detail).model_dump(mode="json") if detail else None
        )
    elif account.role == Role.doctor.value:
        detail = account.doctor_profile
        response["doctor"] = (
            DoctorOut.model_validate(detail).model_dump(mode="json") if detail else None
        )
    return response


async def save_profile(db: AsyncSession, user: Payload, params: Payload, body: Payload) -> Payload:
    data = parse_body(ProfileUpsertRequest, body)
    account = await upsert_profile(db, user["user_id"], user.get("email"), data)
    return {"ok": True, "profile": account_out(account)}


# ----------------------------------------------------------- daily records ----
async def save_habits(db: AsyncSession, user: Payload, params: Payload, body: Payload) -> Payload:
    data = parse_body(HabitIn, body)
    await daily_crud.upsert_habit(db, user["user_id"], data.date or today(), data)
    return {"ok": True}


async def get_habits(db: AsyncSession, user: Payload, params: Payload, body: Payload) -> Payload:
    target_id = await _target_for_read(db, user, params.get("user_id"))
    rows = await daily_crud.fetch_habits(db, target_id, today(), range_days(params))
    return {"items": [HabitOut.model_validate(row).model_dump(mode="json") for row in rows]}


async def save_vitals(db: AsyncSession, user: Payload, params: Payload, body: Payload) -> Payload:
    data = parse_body(VitalIn, body)
    await daily_crud.upsert_vital(db, user["user_id"], data.date or today(), data)
    return {"ok": True}


async def get_vitals(db: AsyncSession, user: Payload, params: Payload, body: Payload) -> Payload:
    target_id = await _target_for_read(db, user, params.get("user_id"))
    rows = await daily_crud.fetch_vitals(db, target_id, today(), range_days(params))
    return {"items": [VitalOut.model_validate(row).model_dump(mode="json") for row in rows]}


# ------------------------------------------------------------------ doctors ----
async def get_doctors(db: AsyncSession, user: Payload, params: Payload, body: Payload) -> Payload:
    doctors = await list_doctors(db)
    return {"items": [doctor.model_dump() for doctor in doctors]}


# -------------------------------------------------------------------- links ----
async def select_link(db: AsyncSession, user: Payload, params: Payload, body: Payload) -> Payload:
    caller_id = user["user_id"]
    caller = await get_account(db, caller_id)
    if caller is None:
        raise BadRequestError("Complete profile first")
    data = parse_body(LinkSelectRequest, body)

    if caller.role == Role.patient.value:
        if not data.doctor_id:
            raise MissingFieldError("doctor_id")
        doctor = await get_account(db, data.doctor_id)
        if doctor is None or doctor.role != Role.doctor.value:
            raise NotFoundError("Doctor not found")
        await link_crud.patient_select_doctor(db, patient_id=caller_id, doctor_id=doctor.id)
    elif caller.role == Role.doctor.value:
        if not data.patient_email:
            raise MissingFieldError("patient_email")
        patient = await get_account_by_email(db, data.patient_email, role=Role.patient.value)
        if patient is None:
            raise NotFoundError("Patient not found")
        await link_crud.doctor_select_patient(db, doctor_id=caller_id, patient_id=patient.id)
    else:
        raise ForbiddenError()
    return {"ok": True}


async def get_links(db: AsyncSession, user: Payload, params: Payload, body: Payload) -> Payload:
    caller_id = user["user_id"]
    caller = await get_account(db, caller_id)
    if caller is None:
        raise BadRequestError("No profile")

    if caller.role == Role.patient.value:
        items = await link_crud.list_linked_doctors(db, caller_id)
    elif caller.role == Role.doctor.value:
        items = await link_crud.list_linked_patients(db, caller_id)
    else:
        raise ForbiddenError()
    return {"items": [item.model_dump() for item in items]}
