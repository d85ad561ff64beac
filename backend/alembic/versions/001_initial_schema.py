"""Initial schema: happenings, scrape logs, custom instructions, flags, profiles, attendance.

- custom_instructions: url_pattern + priority (higher wins), is_active, use_playwright.
- scrape_logs: one row per extraction attempt; raw and parsed model output as JSONB.
- happenings: moderated by status; optional link to the scrape log that produced it.
- event_flags, user_attendance: cascade with their happening.
- user_profiles: id is the auth subject; role basic | submitter | curator | admin.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "custom_instructions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("url_pattern", sa.String(1024), nullable=False),
        sa.Column("use_playwright", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("instructions_text", sa.Text(), nullable=True),
        sa.Column("priority", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_custom_instructions_priority", "custom_instructions", ["priority"], unique=False)

    op.create_table(
        "scrape_logs",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("requested_by_user_id", sa.String(36), nullable=False),
        sa.Column("url_scraped", sa.Text(), nullable=False),
        sa.Column("custom_instruction_id_used", sa.String(36), nullable=True),
        sa.Column("playwright_flag_used", sa.Boolean(), nullable=False),
        sa.Column("raw_llm_response", JSONB, nullable=True),
        sa.Column("parsed_event_data", JSONB, nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("is_reported_bad", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.ForeignKeyConstraint(["custom_instruction_id_used"], ["custom_instructions.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_scrape_logs_created_at", "scrape_logs", ["created_at"], unique=False)
    op.create_index("ix_scrape_logs_requested_by_user_id", "scrape_logs", ["requested_by_user_id"], unique=False)

    op.create_table(
        "happenings",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_datetime", sa.DateTime(timezone=True), nullable=True),
        sa.Column("location", sa.String(512), nullable=True),
        sa.Column("source_url", sa.Text(), nullable=True),
        sa.Column("submitter_user_id", sa.String(36), nullable=False),
        sa.Column("status", sa.String(16), server_default="pending", nullable=False),
        sa.Column("scrape_log_id", sa.String(36), nullable=True),
        sa.ForeignKeyConstraint(["scrape_log_id"], ["scrape_logs.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_happenings_start_datetime", "happenings", ["start_datetime"], unique=False)
    op.create_index("ix_happenings_status", "happenings", ["status"], unique=False)
    op.create_index("ix_happenings_submitter_user_id", "happenings", ["submitter_user_id"], unique=False)

    op.create_table(
        "event_flags",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("happening_id", sa.String(36), nullable=False),
        sa.Column("flagger_user_id", sa.String(36), nullable=False),
        sa.Column("changes_requested", sa.Text(), nullable=False),
        sa.Column("status", sa.String(16), server_default="pending", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("resolved_by_user_id", sa.String(36), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["happening_id"], ["happenings.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_event_flags_happening_id", "event_flags", ["happening_id"], unique=False)
    op.create_index("ix_event_flags_status", "event_flags", ["status"], unique=False)

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("role", sa.String(16), server_default="basic", nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "user_attendance",
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("happening_id", sa.String(36), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["happening_id"], ["happenings.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "happening_id"),
    )
    op.create_index("ix_user_attendance_happening_id", "user_attendance", ["happening_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_user_attendance_happening_id", table_name="user_attendance")
    op.drop_table("user_attendance")
    op.drop_table("user_profiles")
    op.drop_index("ix_event_flags_status", table_name="event_flags")
    op.drop_index("ix_event_flags_happening_id", table_name="event_flags")
    op.drop_table("event_flags")
    op.drop_index("ix_happenings_submitter_user_id", table_name="happenings")
    op.drop_index("ix_happenings_status", table_name="happenings")
    op.drop_index("ix_happenings_start_datetime", table_name="happenings")
    op.drop_table("happenings")
    op.drop_index("ix_scrape_logs_requested_by_user_id", table_name="scrape_logs")
    op.drop_index("ix_scrape_logs_created_at", table_name="scrape_logs")
    op.drop_table("scrape_logs")
    op.drop_index("ix_custom_instructions_priority", table_name="custom_instructions")
    op.drop_table("custom_instructions")
