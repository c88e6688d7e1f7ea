# app/db/crud/user.py
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from app.core.errors import ConflictError, MissingFieldError
from app.db.models.user import AccountModel
from app.db.models.patient import PatientModel
from app.db.models.doctor import DoctorModel
from app.schemas.profile import ProfileUpsertRequest
from app.schemas.shared import Role, PatientIn, DoctorIn

logger = logging.getLogger(__name__)


async def get_account(db: AsyncSession, account_id: str) -> Optional[AccountModel]:
    """
    Get an account by ID with its role detail loaded.

    Args:
        db: Database session
        account_id: identity provider account id

    Returns:
        AccountModel or None if not found
    """
    query = select(AccountModel).options(
        selectinload(AccountModel.patient_profile),
        selectinload(AccountModel.doctor_profile)
    ).where(AccountModel.id == account_id)

    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_account_by_email(
    db: AsyncSession, email: str, role: Optional[str] = None
) -> Optional[AccountModel]:
    """
    Get an account by email, optionally restricted to one role.

    Args:
        db: Database session
        email: account email address
        role: only match accounts with this role (optional)

    Returns:
        AccountModel or None if not found
    """
    query = select(AccountModel).where(AccountModel.email == email)
    if role:
        query = query.where(AccountModel.role == role)

    result = await db.execute(query)
    return result.scalar_one_or_none()


async def upsert_profile(
    db: AsyncSession, account_id: str, email: Optional[str], data: ProfileUpsertRequest
) -> AccountModel:
    """
    Create or update the caller's account and the detail row for its role.

    The role is fixed by the first submission; a later request with a
    different role raises ConflictError. Everything is committed at once.
    """
    account = await get_account(db, account_id)
    is_new = account is None

    if is_new:
        if not email:
            raise MissingFieldError("email")
        logger.info(f"CRUD: creating {data.role.value} account {account_id}")
        account = AccountModel(id=account_id, email=email, name=data.name, role=data.role.value)
        db.add(account)
    else:
        if account.role != data.role.value:
            logger.warning(
                f"CRUD: account {account_id} tried to change role {account.role} -> {data.role.value}"
            )
            raise ConflictError("Role cannot be changed")
        account.name = data.name
        if email:
            account.email = email

    if data.role == Role.patient:
        attr, detail_cls, detail_in = "patient_profile", PatientModel, data.patient or PatientIn()
    else:
        attr, detail_cls, detail_in = "doctor_profile", DoctorModel, data.doctor or DoctorIn()

    # a full-row write: fields left out are cleared
    fields = detail_in.model_dump()
    detail = None if is_new else getattr(account, attr)
    if detail is None:
        setattr(account, attr, detail_cls(user_id=account_id, **fields))
    else:
        for key, value in fields.items():
            setattr(detail, key, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Email already registered")

    await db.refresh(account)
    return account
