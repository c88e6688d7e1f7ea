# app/db/upsert.py
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def dialect_insert(db: AsyncSession, model):
    """
    Return an INSERT for `model` that supports ON CONFLICT on the session's dialect.
    Both PostgreSQL and SQLite understand `on_conflict_do_update`.
    """
    dialect = db.get_bind().dialect.name
    try:
        insert = _INSERTS[dialect]
    except KeyError:
        raise RuntimeError(f"Upserts are not supported on the '{dialect}' dialect")
    return insert(model)
