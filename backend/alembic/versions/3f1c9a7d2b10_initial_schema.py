"""Initial schema

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _owner_fk() -> sa.Column:
    return sa.Column("user_id", sa.String(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False, unique=True),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("phone_number", sa.String(), nullable=True),
        sa.Column("rut", sa.String(), nullable=True, unique=True),
        sa.Column("profile_picture_url", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "medical_info",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("medical_conditions", sa.JSON(), nullable=False),
        sa.Column("allergies", sa.JSON(), nullable=False),
        sa.Column("medications", sa.JSON(), nullable=False),
        sa.Column("blood_type", sa.String(), nullable=True),
        sa.Column("emergency_notes", sa.String(), nullable=True),
        sa.Column("voice_password_hash", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "emergency_contacts",
        sa.Column("id", sa.String(), primary_key=True),
        _owner_fk(),
        sa.Column("contact_name", sa.String(), nullable=False),
        sa.Column("phone_number", sa.String(), nullable=False),
        sa.Column("relationship", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "vehicles",
        sa.Column("id", sa.String(), primary_key=True),
        _owner_fk(),
        sa.Column("license_plate", sa.String(), nullable=False),
        sa.Column("brand", sa.String(), nullable=False),
        sa.Column("model", sa.String(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("color", sa.String(), nullable=False),
        sa.Column("vin", sa.String(), nullable=True),
        sa.Column("vehicle_type", sa.String(), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "vehicle_insurance",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("vehicle_id", sa.String(), sa.ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("insurance_company", sa.String(), nullable=False),
        sa.Column("policy_number", sa.String(), nullable=False),
        sa.Column("coverage_type", sa.String(), nullable=False),
        sa.Column("expiration_date", sa.DateTime(), nullable=False),
        sa.Column("phone_insurance", sa.String(), nullable=False),
        sa.Column("claim_process_info", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "addresses",
        sa.Column("id", sa.String(), primary_key=True),
        _owner_fk(),
        sa.Column("street_address", sa.String(), nullable=False),
        sa.Column("city", sa.String(), nullable=False),
        sa.Column("region", sa.String(), nullable=False),
        sa.Column("postal_code", sa.String(), nullable=True),
        sa.Column("country", sa.String(), nullable=False),
        sa.Column("address_type", sa.String(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_table(
        "bank_accounts",
        sa.Column("id", sa.String(), primary_key=True),
        _owner_fk(),
        sa.Column("bank_name", sa.String(), nullable=False),
        sa.Column("account_type", sa.String(), nullable=False),
        sa.Column("account_number", sa.String(), nullable=False),
        sa.Column("rut", sa.String(), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "health_insurance",
        sa.Column("id", sa.String(), primary_key=True),
        _owner_fk(),
        sa.Column("primary_provider", sa.Boolean(), nullable=False),
        sa.Column("provider_name", sa.String(), nullable=False),
        sa.Column("plan_name", sa.String(), nullable=True),
        sa.Column("member_id", sa.String(), nullable=False),
        sa.Column("coverage_info", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "supplementary_insurance",
        sa.Column("id", sa.String(), primary_key=True),
        _owner_fk(),
        sa.Column("insurance_type", sa.String(), nullable=False),
        sa.Column("insurance_company", sa.String(), nullable=False),
        sa.Column("policy_number", sa.String(), nullable=False),
        sa.Column("coverage_info", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "emergency_events",
        sa.Column("id", sa.String(), primary_key=True),
        _owner_fk(),
        sa.Column("event_type", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("audio_recording_url", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        *_timestamps(),
    )
    op.create_table(
        "validation_questions",
        sa.Column("id", sa.String(), primary_key=True),
        _owner_fk(),
        sa.Column("question", sa.String(), nullable=False),
        sa.Column("answer_hash", sa.String(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    for table in (
        "validation_questions",
        "emergency_events",
        "supplementary_insurance",
        "health_insurance",
        "bank_accounts",
        "addresses",
        "vehicle_insurance",
        "vehicles",
        "emergency_contacts",
        "medical_info",
        "users",
    ):
        op.drop_table(table)
