import asyncio
import sys
import uuid
from pathlib import Path

# Add the parent directory to sys.path to allow importing from app
backend_dir = Path(__file__).parent.parent
sys.path.append(str(backend_dir))

from app.config.settings import settings
from app.core.errors import ConflictError
from app.db.base import get_engine, get_session_factory
from app.db.crud.user import get_account_by_email, upsert_profile
from app.db.session import set_global_session_factory, script_db_session
from app.schemas.profile import ProfileUpsertRequest

# email, name, speciality, languages, years of experience
DOCTORS = [
    ("dr.smith@example.com", "John Smith", "Cardiology", "English", 22),
    ("dr.johnson@example.com", "Alice Johnson", "Cardiology", "English, French", 15),
    ("dr.house@example.com", "Gregory House", "Diagnostic Medicine", "English", 30),
    ("dr.chen@example.com", "Mei Chen", "Neurology", "English, Mandarin", 12),
    ("dr.brown@example.com", "Sarah Brown", "Pediatrics", "English, Spanish", 18),
    ("dr.taylor@example.com", "Emily Taylor", "Dermatology", "English", 7),
    ("dr.young@example.com", "Christopher Young", "Endocrinology", "English, German", 16),
    ("dr.khalil@example.com", "Rania Khalil", "General Practice", "Arabic, English", 9),
]

# stable ids so re-running the script and the identity provider agree
ID_NAMESPACE = uuid.UUID("6f1d0c2e-4d0b-4b8f-9a57-3c2f1f0c9a11")


async def main() -> None:
    print("Connecting to database at:", settings.database_url)
    engine = await get_engine(str(settings.database_url))
    set_global_session_factory(await get_session_factory(engine))

    async with script_db_session() as db:
        for email, name, speciality, languages, years in DOCTORS:
            if await get_account_by_email(db, email):
                print(f"Doctor with email {email} already exists. Skipping.")
                continue

            account_id = str(uuid.uuid5(ID_NAMESPACE, email))
            profile = ProfileUpsertRequest.model_validate({
                "role": "doctor",
                "name": name,
                "doctor": {
                    "speciality": speciality,
                    "languages_spoken": languages,
                    "years_of_experience": years,
                },
            })
            try:
                await upsert_profile(db, account_id, email, profile)
            except ConflictError as e:
                print(f"Could not add {email}: {e.detail}")
                continue
            print(f"Added doctor: {name} ({email}), id: {account_id}, speciality: {speciality}")

    print("Doctors successfully added to the database.")
    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(main())
