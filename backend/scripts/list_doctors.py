import asyncio
import sys
from pathlib import Path

# Add the parent directory to sys.path to allow importing from app
backend_dir = Path(__file__).parent.parent
sys.path.append(str(backend_dir))

from app.config.settings import settings
from app.db.base import get_engine, get_session_factory
from app.db.crud.doctor import list_doctors
from app.db.session import set_global_session_factory, script_db_session

async def main() -> None:
    print("Connecting to database at:", settings.database_url)
    engine = await get_engine(str(settings.database_url))
    set_global_session_factory(await get_session_factory(engine))

    async with script_db_session() as db:
        doctors = await list_doctors(db)

    if not doctors:
        print("No doctors found in the database.")
    else:
        print(f"Found {len(doctors)} doctors in the database:")
        print("-" * 100)
        print(f"{'ID':<38} {'Name':<25} {'Email':<30} {'Speciality':<25}")
        print("-" * 100)

        for doctor in doctors:
            print(f"{doctor.id:<38} {doctor.name or '-':<25} {doctor.email:<30} {doctor.speciality or '-':<25}")

    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(main())
