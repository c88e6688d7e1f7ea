# tests/test_access.py
import pytest

from app.core.access import authorize_target, can_doctor_view
from app.core.errors import ForbiddenError
from app.db.crud.link import doctor_select_patient, patient_select_doctor
from app.db.models import AccountModel


@pytest.fixture
async def accounts(db):
    patient = AccountModel(id="p1", email="p1@example.com", role="patient")
    other = AccountModel(id="p2", email="p2@example.com", role="patient")
    doctor = AccountModel(id="d1", email="d1@example.com", role="doctor")
    db.add_all([patient, other, doctor])
    await db.commit()
    return patient, other, doctor


async def test_self_access_needs_no_link(db, accounts):
    patient, _, doctor = accounts
    await authorize_target(db, patient.id, patient, patient.id)
    await authorize_target(db, doctor.id, doctor, doctor.id)
    # even without a profile row
    await authorize_target(db, "new-user", None, "new-user")


async def test_patient_cannot_read_other_patient(db, accounts):
    patient, other, _ = accounts
    with pytest.raises(ForbiddenError) as exc:
        await authorize_target(db, patient.id, patient, other.id)
    assert exc.value.detail == "Forbidden"


async def test_caller_without_profile_is_forbidden(db, accounts):
    patient, _, _ = accounts
    with pytest.raises(ForbiddenError):
        await authorize_target(db, "nobody", None, patient.id)


async def test_doctor_without_link_is_denied(db, accounts):
    patient, _, doctor = accounts
    with pytest.raises(ForbiddenError) as exc:
        await authorize_target(db, doctor.id, doctor, patient.id)
    assert exc.value.detail == "No permission"


@pytest.mark.parametrize("side", ["patient", "doctor"])
async def test_one_sided_consent_is_denied(db, accounts, side):
    patient, _, doctor = accounts
    if side == "patient":
        await patient_select_doctor(db, patient_id=patient.id, doctor_id=doctor.id)
    else:
        await doctor_select_patient(db, doctor_id=doctor.id, patient_id=patient.id)

    assert not await can_doctor_view(db, doctor.id, patient.id)
    with pytest.raises(ForbiddenError):
        await authorize_target(db, doctor.id, doctor, patient.id)


async def test_mutual_consent_allows_doctor(db, accounts):
    patient, other, doctor = accounts
    await patient_select_doctor(db, patient_id=patient.id, doctor_id=doctor.id)
    await doctor_select_patient(db, doctor_id=doctor.id, patient_id=patient.id)

    assert await can_doctor_view(db, doctor.id, patient.id)
    await authorize_target(db, doctor.id, doctor, patient.id)
    # the link is per pair
    with pytest.raises(ForbiddenError):
        await authorize_target(db, doctor.id, doctor, other.id)


async def test_unknown_target_is_forbidden_not_missing(db, accounts):
    _, _, doctor = accounts
    with pytest.raises(ForbiddenError):
        await authorize_target(db, doctor.id, doctor, "does-not-exist")
