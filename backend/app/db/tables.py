"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL. alembic/env.py asserts that the registered
models match this list exactly.
"""
ALL_TABLE_NAMES = (
    "custom_instructions",
    "event_flags",
    "happenings",
    "scrape_logs",
    "user_attendance",
    "user_profiles",
)
