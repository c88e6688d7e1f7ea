# app/db/crud/link.py
import logging
from typing import List, Optional

from sqlalchemy import select, true
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.link import DoctorPatientLinkModel
from app.db.models.user import AccountModel
from app.db.models.doctor import DoctorModel
from app.db.upsert import dialect_insert
from app.schemas.link import LinkedDoctor, LinkedPatient

logger = logging.getLogger(__name__)


async def get_link(
    db: AsyncSession, patient_id: str, doctor_id: str
) -> Optional[DoctorPatientLinkModel]:
    result = await db.execute(
        select(DoctorPatientLinkModel).where(
            DoctorPatientLinkModel.patient_id == patient_id,
            DoctorPatientLinkModel.doctor_id == doctor_id,
        )
    )
    return result.scalar_one_or_none()


async def _consent(db: AsyncSession, patient_id: str, doctor_id: str, flag: str) -> None:
    """
    Set one consent flag on the (patient, doctor) link, creating the link if needed.

    A single INSERT ... ON CONFLICT keeps concurrent first contact from both
    sides down to one row. Only `flag` is touched on conflict.
    """
    stmt = dialect_insert(db, DoctorPatientLinkModel).values(
        patient_id=patient_id,
        doctor_id=doctor_id,
        patient_consented=(flag == "patient_consented"),
        doctor_consented=(flag == "doctor_consented"),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[DoctorPatientLinkModel.patient_id, DoctorPatientLinkModel.doctor_id],
        set_={flag: True},
    )
    await db.execute(stmt)
    await db.commit()
    logger.info(f"CRUD: link patient={patient_id} doctor={doctor_id} set {flag}")


async def patient_select_doctor(db: AsyncSession, patient_id: str, doctor_id: str) -> None:
    await _consent(db, patient_id, doctor_id, "patient_consented")


async def doctor_select_patient(db: AsyncSession, doctor_id: str, patient_id: str) -> None:
    await _consent(db, patient_id, doctor_id, "doctor_consented")


def _mutual():
    return (
        DoctorPatientLinkModel.patient_consented == true(),
        DoctorPatientLinkModel.doctor_consented == true(),
    )


async def list_linked_doctors(db: AsyncSession, patient_id: str) -> List[LinkedDoctor]:
    """
    Doctors the patient shares data with (both sides consented).

    Args:
        db (AsyncSession): the database session
        patient_id (str): the patient's account id

    Returns:
        List[LinkedDoctor]: id, name and speciality of each linked doctor
    """
    result = await db.execute(
        select(AccountModel.id, AccountModel.name, DoctorModel.speciality)
        .join(DoctorPatientLinkModel, DoctorPatientLinkModel.doctor_id == AccountModel.id)
        .outerjoin(DoctorModel, DoctorModel.user_id == AccountModel.id)
        .where(DoctorPatientLinkModel.patient_id == patient_id, *_mutual())
        .order_by(DoctorPatientLinkModel.created_at, DoctorPatientLinkModel.id)
    )
    return [LinkedDoctor(id=row.id, name=row.name, speciality=row.speciality) for row in result.all()]


async def list_linked_patients(db: AsyncSession, doctor_id: str) -> List[LinkedPatient]:
    """
    Patients who share data with the doctor (both sides consented).

    Args:
        db (AsyncSession): the database session
        doctor_id (str): the doctor's account id

    Returns:
        List[LinkedPatient]: id, name and email of each linked patient
    """
    result = await db.execute(
        select(AccountModel.id, AccountModel.name, AccountModel.email)
        .join(DoctorPatientLinkModel, DoctorPatientLinkModel.patient_id == AccountModel.id)
        .where(DoctorPatientLinkModel.doctor_id == doctor_id, *_mutual())
        .order_by(DoctorPatientLinkModel.created_at, DoctorPatientLinkModel.id)
    )
    return [LinkedPatient(id=row.id, name=row.name, email=row.email) for row in result.all()]
