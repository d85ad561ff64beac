#!/usr/bin/env python3
"""
Quick checks so the backend can start. Run from backend/:
  python scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

# Run from backend/
backend_dir = Path(__file__).resolve().parent.parent
os.chdir(backend_dir)
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))


def main():
    errors = []

    # 1) .env
    env_file = backend_dir / ".env"
    if not env_file.exists():
        errors.append("backend/.env missing. Copy from backend/.env.example and set DATABASE_URL, JWT_SECRET, etc.")
    else:
        print("OK  .env exists")

    # 2) Settings that every request path needs
    from app.config import settings
    if not settings.jwt_secret:
        errors.append("JWT_SECRET not set: every authenticated request will fail with 401.")
        print("FAIL JWT_SECRET")
    else:
        print("OK  JWT_SECRET")
    if not settings.gemini_api_key:
        print("WARN GEMINI_API_KEY not set: /scrape attempts will be logged as failures")
    if not settings.mapbox_token:
        print("WARN MAPBOX_TOKEN not set: /happenings/map will be empty and radius filters are skipped")

    # 3) DB connection and schema
    try:
        from sqlalchemy import inspect, text
        from app.db.session import engine
        from app.db.tables import ALL_TABLE_NAMES
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
        missing = set(ALL_TABLE_NAMES) - set(inspect(engine).get_table_names())
        if missing:
            errors.append(f"Tables missing: {', '.join(sorted(missing))}. Run: alembic upgrade head")
            print("FAIL Schema")
        else:
            print("OK  Schema (all tables present)")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 4) App import (catches missing deps, bad imports)
    try:
        from app.main import app  # noqa: F401
        print("OK  App import (app.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)

    # 5) Headless browser for instructions with use_playwright
    try:
        from playwright.sync_api import sync_playwright
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True)
            browser.close()
        print("OK  Playwright Chromium")
    except Exception as e:
        print("WARN Playwright Chromium unavailable (run: playwright install chromium):", e)

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed. Start with: uvicorn app.main:app --reload --port 8000")
    return 0


if __name__ == "__main__":
    sys.exit(main())
