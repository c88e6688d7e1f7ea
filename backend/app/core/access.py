# app/core/access.py
"""
Authorization rule for requests that act on another account's data.

A caller may always read their own rows. Reading someone else's rows is only
allowed for a doctor, and only when the patient and the doctor have both
opted in on the link between them. The check runs before the target is
looked up, so a denied caller can't tell a missing account from a private one.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ForbiddenError
from app.db.crud.link import get_link
from app.db.models.user import AccountModel
from app.schemas.shared import Role

logger = logging.getLogger(__name__)


async def can_doctor_view(db: AsyncSession, doctor_id: str, patient_id: str) -> bool:
    """True when a link exists for (patient, doctor) and both parties consented."""
    link = await get_link(db, patient_id=patient_id, doctor_id=doctor_id)
    return link is not None and link.is_mutual


async def authorize_target(
    db: AsyncSession,
    caller_id: str,
    caller: Optional[AccountModel],
    target_id: str,
) -> None:
    """
    Raise ForbiddenError unless `caller_id` may read `target_id`'s data.

    `caller` is the caller's account row, or None when they have no profile yet.
    """
    if target_id == caller_id:
        return

    if caller is None or caller.role != Role.doctor.value:
        logger.warning(
            f"ACCESS: {caller_id} (role={caller.role if caller else None}) denied access to {target_id}"
        )
        raise ForbiddenError("Forbidden")

    if not await can_doctor_view(db, doctor_id=caller_id, patient_id=target_id):
        logger.warning(f"ACCESS: doctor {caller_id} has no mutual link with {target_id}")
        raise ForbiddenError("No permission")

    logger.debug(f"ACCESS: doctor {caller_id} allowed to read {target_id}")
