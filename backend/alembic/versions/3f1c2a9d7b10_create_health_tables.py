"""create_health_tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2025-09-14 10:02:11.418305

"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "3f1c2a9d7b10"
down_revision = None
branch_labels = None
depends_on = None

# Row level security mirrors the API's access rule. The service binds the
# caller with set_config('app.account_id', ...) for every request.
CURRENT_ACCOUNT = "current_setting('app.account_id', true)"
MUTUAL_LINK = f"""exists (
    select 1 from doctor_patient_links l
    where l.patient_id = {{owner}} and l.doctor_id = {CURRENT_ACCOUNT}
      and l.patient_consented and l.doctor_consented
)"""

POLICIES = [
    ("accounts", "accounts self or linked doctor read", "select",
     f"id = {CURRENT_ACCOUNT} or role = 'doctor' or " + MUTUAL_LINK.format(owner="id"), None),
    ("accounts", "accounts self write", "update", f"id = {CURRENT_ACCOUNT}", f"id = {CURRENT_ACCOUNT}"),
    ("patient_profiles", "patient_profiles self", "all",
     f"user_id = {CURRENT_ACCOUNT}", f"user_id = {CURRENT_ACCOUNT}"),
    ("patient_profiles", "patient_profiles linked doctor read", "select",
     MUTUAL_LINK.format(owner="user_id"), None),
    ("doctor_profiles", "doctor_profiles public read", "select", "true", None),
    ("doctor_profiles", "doctor_profiles self write", "all",
     f"user_id = {CURRENT_ACCOUNT}", f"user_id = {CURRENT_ACCOUNT}"),
    ("habits", "habits self", "all", f"user_id = {CURRENT_ACCOUNT}", f"user_id = {CURRENT_ACCOUNT}"),
    ("habits", "habits linked doctor read", "select", MUTUAL_LINK.format(owner="user_id"), None),
    ("vitals", "vitals self", "all", f"user_id = {CURRENT_ACCOUNT}", f"user_id = {CURRENT_ACCOUNT}"),
    ("vitals", "vitals linked doctor read", "select", MUTUAL_LINK.format(owner="user_id"), None),
    ("doctor_patient_links", "links self", "all",
     f"{CURRENT_ACCOUNT} in (patient_id, doctor_id)",
     f"{CURRENT_ACCOUNT} in (patient_id, doctor_id)"),
]


def upgrade():
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=True),
        sa.Column("role", sa.String(length=10), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.CheckConstraint("role in ('patient', 'doctor')", name="ck_accounts_role"),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_accounts")),
    )
    op.create_index(op.f("ix_accounts_email"), "accounts", ["email"], unique=True)

    op.create_table(
        "patient_profiles",
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("height", sa.Float(), nullable=True),
        sa.Column("gender", sa.String(length=30), nullable=True),
        sa.Column("nationality", sa.String(length=80), nullable=True),
        sa.Column("medical_history", sa.Text(), nullable=True),
        sa.Column("current_medications", sa.Text(), nullable=True),
        sa.Column("allergies", sa.Text(), nullable=True),
        sa.Column("family_history", sa.Text(), nullable=True),
        sa.Column("lifestyle_factors", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["accounts.id"],
            name=op.f("fk_patient_profiles_user_id_accounts"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("user_id", name=op.f("pk_patient_profiles")),
    )

    op.create_table(
        "doctor_profiles",
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("gender", sa.String(length=30), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("nationality", sa.String(length=80), nullable=True),
        sa.Column("level_of_education", sa.String(length=120), nullable=True),
        sa.Column("medical_school", sa.String(length=200), nullable=True),
        sa.Column("year_of_education", sa.Integer(), nullable=True),
        sa.Column("medical_license_number", sa.String(length=80), nullable=True),
        sa.Column("license_region", sa.String(length=120), nullable=True),
        sa.Column("speciality", sa.String(length=120), nullable=True),
        sa.Column("years_of_experience", sa.Integer(), nullable=True),
        sa.Column("current_workplace", sa.String(length=200), nullable=True),
        sa.Column("languages_spoken", sa.String(length=200), nullable=True),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["accounts.id"],
            name=op.f("fk_doctor_profiles_user_id_accounts"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("user_id", name=op.f("pk_doctor_profiles")),
    )

    op.create_table(
        "habits",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("steps", sa.Integer(), server_default="0", nullable=False),
        sa.Column("water_cups", sa.Integer(), server_default="0", nullable=False),
        sa.Column("sleep_hours", sa.Float(), server_default="0", nullable=False),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["accounts.id"],
            name=op.f("fk_habits_user_id_accounts"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_habits")),
        sa.UniqueConstraint("user_id", "date", name="uq_habits_user_date"),
    )
    op.create_index("habits_user_date_idx", "habits", ["user_id", sa.text("date DESC")])

    op.create_table(
        "vitals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("blood_glucose", sa.Integer(), nullable=True),
        sa.Column("blood_pressure_sys", sa.Integer(), nullable=True),
        sa.Column("blood_pressure_dia", sa.Integer(), nullable=True),
        sa.Column("heart_rate", sa.Integer(), nullable=True),
        sa.Column("body_temperature", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["accounts.id"],
            name=op.f("fk_vitals_user_id_accounts"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_vitals")),
        sa.UniqueConstraint("user_id", "date", name="uq_vitals_user_date"),
    )
    op.create_index("vitals_user_date_idx", "vitals", ["user_id", sa.text("date DESC")])

    op.create_table(
        "doctor_patient_links",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("patient_id", sa.String(length=64), nullable=False),
        sa.Column("doctor_id", sa.String(length=64), nullable=False),
        sa.Column("patient_consented", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("doctor_consented", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["accounts.id"],
            name=op.f("fk_doctor_patient_links_patient_id_accounts"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["accounts.id"],
            name=op.f("fk_doctor_patient_links_doctor_id_accounts"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_doctor_patient_links")),
        sa.UniqueConstraint("patient_id", "doctor_id", name="uq_links_patient_doctor"),
    )
    op.create_index(
        op.f("ix_doctor_patient_links_patient_id"), "doctor_patient_links", ["patient_id"]
    )
    op.create_index(
        op.f("ix_doctor_patient_links_doctor_id"), "doctor_patient_links", ["doctor_id"]
    )

    if op.get_bind().dialect.name == "postgresql":
        for table in {policy[0] for policy in POLICIES}:
            op.execute(f"alter table {table} enable row level security")
        for table, name, command, using, check in POLICIES:
            sql = f'create policy "{name}" on {table} for {command} using ({using})'
            if check:
                sql += f" with check ({check})"
            op.execute(sql)


def downgrade():
    op.drop_table("doctor_patient_links")
    op.drop_table("vitals")
    op.drop_table("habits")
    op.drop_table("doctor_profiles")
    op.drop_table("patient_profiles")
    op.drop_index(op.f("ix_accounts_email"), table_name="accounts")
    op.drop_table("accounts")
