# tests/test_api_links.py
from sqlalchemy import select

from app.db.models import DoctorPatientLinkModel
from tests.conftest import DOCTOR, OTHER_PATIENT, PATIENT


async def _links(db):
    result = await db.execute(select(DoctorPatientLinkModel))
    return result.scalars().all()


async def test_mutual_consent_scenario(api, patient, doctor):
    await api.post(PATIENT, "vitals.upsert", {"date": "2024-01-02", "heart_rate": 64})

    response = await api.get(DOCTOR, "vitals.fetch", user_id=PATIENT["user_id"])
    assert response.status_code == 403

    assert (await api.post(PATIENT, "link.select", {"doctor_id": DOCTOR["user_id"]})).status_code == 200
    # one-sided consent is still not enough
    response = await api.get(DOCTOR, "vitals.fetch", user_id=PATIENT["user_id"])
    assert response.status_code == 403

    assert (await api.post(DOCTOR, "link.select", {"patient_email": PATIENT["email"]})).status_code == 200
    response = await api.get(DOCTOR, "vitals.fetch", user_id=PATIENT["user_id"])
    assert response.status_code == 200
    assert response.json()["items"][0]["heart_rate"] == 64


async def test_patient_select_is_idempotent(api, db, patient, doctor):
    for _ in range(2):
        response = await api.post(PATIENT, "link.select", {"doctor_id": DOCTOR["user_id"]})
        assert response.json() == {"ok": True}

    links = await _links(db)
    assert len(links) == 1
    assert links[0].patient_id == PATIENT["user_id"]
    assert links[0].doctor_id == DOCTOR["user_id"]
    assert links[0].patient_consented is True
    assert links[0].doctor_consented is False


async def test_doctor_first_then_patient_converges_to_one_row(api, db, patient, doctor):
    await api.post(DOCTOR, "link.select", {"patient_email": PATIENT["email"]})
    await api.post(PATIENT, "link.select", {"doctor_id": DOCTOR["user_id"]})
    await api.post(DOCTOR, "link.select", {"patient_email": PATIENT["email"]})

    links = await _links(db)
    assert len(links) == 1
    assert links[0].patient_consented and links[0].doctor_consented


async def test_link_select_requires_profile(api, doctor):
    response = await api.post(PATIENT, "link.select", {"doctor_id": DOCTOR["user_id"]})
    assert response.status_code == 400
    assert response.json() == {"error": "Complete profile first"}


async def test_link_select_requires_target_field(api, patient, doctor):
    response = await api.post(PATIENT, "link.select", {})
    assert response.json() == {"error": "doctor_id required"}
    response = await api.post(DOCTOR, "link.select", {"doctor_id": "x"})
    assert response.status_code == 400
    assert response.json() == {"error": "patient_email required"}


async def test_patient_must_select_a_doctor(api, db, patient):
    await api.register(OTHER_PATIENT, "patient", "Other")
    response = await api.post(PATIENT, "link.select", {"doctor_id": OTHER_PATIENT["user_id"]})
    assert response.status_code == 404
    assert response.json() == {"error": "Doctor not found"}
    assert await _links(db) == []


async def test_doctor_selects_only_patients_by_email(api, patient, doctor):
    response = await api.post(DOCTOR, "link.select", {"patient_email": "nobody@example.com"})
    assert response.status_code == 404
    assert response.json() == {"error": "Patient not found"}

    # an email that belongs to a doctor is not a patient
    response = await api.post(DOCTOR, "link.select", {"patient_email": DOCTOR["email"]})
    assert response.status_code == 404


async def test_link_list_shows_only_mutual_counterparts(api, linked):
    await api.register(OTHER_PATIENT, "patient", "Other")
    await api.post(OTHER_PATIENT, "link.select", {"doctor_id": DOCTOR["user_id"]})

    doctors = (await api.get(PATIENT, "link.list")).json()["items"]
    assert doctors == [{"id": DOCTOR["user_id"], "name": "Dr Doc", "speciality": "Cardiology"}]

    patients = (await api.get(DOCTOR, "link.list")).json()["items"]
    assert patients == [{"id": PATIENT["user_id"], "name": "Pat Patient", "email": PATIENT["email"]}]

    assert (await api.get(OTHER_PATIENT, "link.list")).json() == {"items": []}


async def test_link_list_requires_profile(api):
    response = await api.get(PATIENT, "link.list")
    assert response.status_code == 400
    assert response.json() == {"error": "No profile"}


async def test_doctor_directory_is_public(api, doctor):
    await api.register(
        {"user_id": "doctor-2", "email": "doc2@example.com"}, "doctor", "Another Doc",
        speciality="Neurology",
    )
    # any authenticated caller, with or without a profile
    response = await api.get(OTHER_PATIENT, "doctors.list")
    assert response.status_code == 200
    assert response.json()["items"] == [
        {
            "id": "doctor-2",
            "name": "Another Doc",
            "email": "doc2@example.com",
            "speciality": "Neurology",
            "languages_spoken": None,
        },
        {
            "id": DOCTOR["user_id"],
            "name": "Dr Doc",
            "email": DOCTOR["email"],
            "speciality": "Cardiology",
            "languages_spoken": "English",
        },
    ]
