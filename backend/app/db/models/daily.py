# app/db/models/daily.py
from sqlalchemy import (
    Column,
    Integer,
    Float,
    Date,
    String,
    ForeignKey,
    UniqueConstraint,
    Index,
)
from app.db.base import Base


class HabitModel(Base):
    __tablename__ = "habits"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    steps = Column(Integer, nullable=False, default=0, server_default="0")
    water_cups = Column(Integer, nullable=False, default=0, server_default="0")
    sleep_hours = Column(Float, nullable=False, default=0, server_default="0")

    # one entry per account per calendar day
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_habits_user_date"),
        Index("habits_user_date_idx", "user_id", date.desc()),
    )


class VitalModel(Base):
    __tablename__ = "vitals"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    # NULL means "not recorded"
    blood_glucose = Column(Integer)
    blood_pressure_sys = Column(Integer)
    blood_pressure_dia = Column(Integer)
    heart_rate = Column(Integer)
    body_temperature = Column(Float)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_vitals_user_date"),
        Index("vitals_user_date_idx", "user_id", date.desc()),
    )
