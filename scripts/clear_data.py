#!/usr/bin/env python3
"""
Database clearing script for the Volunteer Hub reporting backend.

Removes all activity data while preserving the schema.

IMPORTANT: This will delete ALL data! Use with caution.

Usage:
    python scripts/clear_data.py [--confirm] [--preserve-admin]

    --confirm: Skip confirmation prompt
    --preserve-admin: Keep profiles whose role is admin
"""

import argparse
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
project_root = Path(__file__).parent.parent
env_path = project_root / ".env"
load_dotenv(dotenv_path=env_path)

# Add project root to path
sys.path.insert(0, str(project_root))

from sqlmodel import Session, delete, or_, col
from app.database.engine import engine
from app.models.event import Event, Shift, VolunteerAssignment
from app.models.volunteer import Profile, HourLog, VolunteerGroup, VolunteerGroupMembership

# Children before parents
TABLES_IN_DELETE_ORDER = [
    VolunteerGroupMembership,
    VolunteerGroup,
    HourLog,
    VolunteerAssignment,
    Shift,
    Event,
]


def clear_data(preserve_admin: bool = False) -> None:
    with Session(engine) as session:
        for model in TABLES_IN_DELETE_ORDER:
            result = session.exec(delete(model))
            print(f"  Deleted {result.rowcount} rows from {model.__tablename__}")

        profiles = delete(Profile)
        if preserve_admin:
            profiles = profiles.where(or_(col(Profile.role).is_(None), Profile.role != "admin"))
        result = session.exec(profiles)
        print(f"  Deleted {result.rowcount} rows from {Profile.__tablename__}")

        session.commit()


def main():
    parser = argparse.ArgumentParser(description="Clear all volunteer activity data")
    parser.add_argument("--confirm", action="store_true", help="Skip confirmation prompt")
    parser.add_argument("--preserve-admin", action="store_true", help="Keep admin profiles")
    args = parser.parse_args()

    if not args.confirm:
        answer = input("This will delete ALL activity data. Type 'yes' to continue: ")
        if answer.strip().lower() != "yes":
            print("Aborted.")
            return

    clear_data(preserve_admin=args.preserve_admin)
    print("Done.")


if __name__ == "__main__":
    main()
