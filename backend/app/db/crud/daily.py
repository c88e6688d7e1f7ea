# app/db/crud/daily.py
import logging
from datetime import date, timedelta
from typing import List, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.daily import HabitModel, VitalModel
from app.db.upsert import dialect_insert
from app.schemas.daily import HabitIn, VitalIn

logger = logging.getLogger(__name__)

HABIT_FIELDS = ("steps", "water_cups", "sleep_hours")
VITAL_FIELDS = (
    "blood_glucose",
    "blood_pressure_sys",
    "blood_pressure_dia",
    "heart_rate",
    "body_temperature",
)


async def _upsert_daily(db: AsyncSession, model, user_id: str, day: date, values: dict) -> None:
    stmt = dialect_insert(db, model).values(user_id=user_id, date=day, **values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[model.user_id, model.date],
        set_={name: stmt.excluded[name] for name in values},
    )
    await db.execute(stmt)
    await db.commit()


async def upsert_habit(db: AsyncSession, user_id: str, day: date, data: HabitIn) -> None:
    """
    Store the habit entry for (user_id, day), overwriting any previous values.

    Args:
        db (AsyncSession): the database session
        user_id (str): owner of the entry
        day (date): calendar date of the entry
        data (HabitIn): parsed habit values (missing values already coerced to 0)
    """
    values = {name: getattr(data, name) for name in HABIT_FIELDS}
    logger.info(f"CRUD: upserting habits for user {user_id} on {day}: {values}")
    await _upsert_daily(db, HabitModel, user_id, day, values)


async def upsert_vital(db: AsyncSession, user_id: str, day: date, data: VitalIn) -> None:
    """
    Store the vitals entry for (user_id, day). Fields not sent are stored as NULL.
    """
    values = {name: getattr(data, name) for name in VITAL_FIELDS}
    logger.info(f"CRUD: upserting vitals for user {user_id} on {day}")
    await _upsert_daily(db, VitalModel, user_id, day, values)


def window_start(today: date, range_days: int) -> date:
    """First day of a `range_days` window ending today, clamped to the earliest date."""
    if range_days >= (today - date.min).days:
        return date.min
    return today - timedelta(days=range_days)


async def _fetch_daily(
    db: AsyncSession, model: Type, user_id: str, since: date
) -> List:
    result = await db.execute(
        select(model)
        .where(model.user_id == user_id, model.date >= since)
        .order_by(model.date.desc())
    )
    return result.scalars().all()


async def fetch_habits(db: AsyncSession, user_id: str, today: date, range_days: int) -> List[HabitModel]:
    """Habit entries from `today - range_days` onwards, newest first."""
    since = window_start(today, range_days)
    logger.debug(f"CRUD: fetching habits for user {user_id} since {since}")
    return await _fetch_daily(db, HabitModel, user_id, since)


async def fetch_vitals(db: AsyncSession, user_id: str, today: date, range_days: int) -> List[VitalModel]:
    """Vital entries from `today - range_days` onwards, newest first."""
    since = window_start(today, range_days)
    logger.debug(f"CRUD: fetching vitals for user {user_id} since {since}")
    return await _fetch_daily(db, VitalModel, user_id, since)
