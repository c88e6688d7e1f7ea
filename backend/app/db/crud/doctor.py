# app/db/crud/doctor.py
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.user import AccountModel
from app.db.models.doctor import DoctorModel
from app.schemas.link import DoctorDirectoryEntry
from app.schemas.shared import Role

logger = logging.getLogger(__name__)


async def list_doctors(db: AsyncSession) -> List[DoctorDirectoryEntry]:
    """
    Public doctor directory: every doctor account that has a doctor profile.

    Args:
        db (AsyncSession): the database session

    Returns:
        List[DoctorDirectoryEntry]: one entry per doctor, ordered by name
    """
    result = await db.execute(
        select(AccountModel, DoctorModel)
        .join(DoctorModel, AccountModel.id == DoctorModel.user_id)
        .where(AccountModel.role == Role.doctor.value)
        .order_by(AccountModel.name, AccountModel.id)
    )
    doctors = result.all()
    logger.debug(f"CRUD: doctor directory has {len(doctors)} entries")

    return [
        DoctorDirectoryEntry(
            id=account.id,
            name=account.name,
            email=account.email,
            speciality=profile.speciality,
            languages_spoken=profile.languages_spoken,
        )
        for account, profile in doctors
    ]
