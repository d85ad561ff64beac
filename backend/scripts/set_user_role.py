#!/usr/bin/env python3
"""Set a user's role directly in the DB (e.g. to bootstrap the first admin).
Run from backend: python scripts/set_user_role.py <user_id> <basic|submitter|curator|admin> [--email EMAIL]
The user id is the auth subject (JWT sub). Creates the profile if the user has never signed in.
"""
import argparse
import sys
from pathlib import Path

# Ensure backend is on path when run as script
backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from app.core.constants import ROLES
from app.db.session import SessionLocal
from app.services.profile_service import get_or_create_profile, role_flags


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("user_id")
    parser.add_argument("role", choices=ROLES)
    parser.add_argument("--email", default=None)
    args = parser.parse_args()

    db = SessionLocal()
    try:
        profile = get_or_create_profile(db, args.user_id, email=args.email)
        previous = profile.role
        profile.role = args.role
        db.commit()
        print(f"{profile.id} ({profile.email or 'no email'}): {previous} -> {profile.role}")
        print("Flags:", ", ".join(k for k, v in role_flags(profile.role).items() if v) or "none")
    except Exception as e:
        db.rollback()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
