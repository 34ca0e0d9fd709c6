#!/usr/bin/env python3
"""
Activity data seeding script for the Volunteer Hub reporting backend.

Fills the configured database with realistic volunteers, events, shifts,
assignments, hour logs and groups so reports can be checked by hand.
Shift times are picked as Eastern wall-clock times and stored as UTC,
the same way the scheduling screens store them.

Usage:
    python scripts/seed_data.py [--volunteers 40] [--events 12] [--groups 5] [--seed 42]

    # Quick run with minimal data
    python scripts/seed_data.py --test
"""

import argparse
import random
import sys
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv
from faker import Faker

# Load environment variables from .env file
project_root = Path(__file__).parent.parent
load_dotenv(dotenv_path=project_root / ".env")

# Add project root to path
sys.path.insert(0, str(project_root))

from sqlmodel import Session
from app.core.civil_time import local_to_absolute
from app.database.engine import engine, create_db_and_tables
from app.models.event import Event, Shift, VolunteerAssignment, AssignmentStatus
from app.models.volunteer import (
    Profile, HourLog, VolunteerGroup, VolunteerGroupMembership, VOLUNTEER_ROLE
)

fake = Faker("en_US")

EVENT_NAMES = [
    "Mobile Pantry", "Community Garden Workday", "Park Cleanup", "Food Bank Sorting",
    "Holiday Meal Packing", "Coat Drive", "Literacy Night", "River Trash Pickup",
    "Senior Center Visit", "Back-to-School Supply Drive", "Blood Drive", "Habitat Build Day",
]

GROUP_NAMES = [
    "Weekend Warriors", "Youth Corps", "Corporate Partners", "Faith Outreach",
    "Retired Teachers", "Student Service Club", "Neighborhood Watch",
]

SHIFT_STARTS = [(8, 0), (9, 30), (12, 0), (14, 0), (17, 30)]

# ANSI color codes for terminal output
class Colors:
    GREEN = '\033[92m'
    CYAN = '\033[96m'
    RESET = '\033[0m'
    BOLD = '\033[1m'


class ActivitySeeder:
    """Creates a consistent activity dataset in one session."""

    def __init__(self, session: Session, today: date):
        self.session = session
        self.today = today
        self.created = defaultdict(int)

    def _add(self, obj):
        self.session.add(obj)
        self.created[type(obj).__name__] += 1
        return obj

    def seed_profiles(self, count: int) -> list:
        profiles = []
        for i in range(count):
            # Roughly one in eight volunteers is a legacy row with no role
            role = None if i % 8 == 7 else VOLUNTEER_ROLE
            profiles.append(self._add(Profile(
                first_name=fake.first_name(),
                last_name=fake.last_name(),
                email=fake.unique.email(),
                role=role,
                created_at=fake.date_time_between(start_date="-2y", end_date="-30d"),
            )))
        self._add(Profile(first_name="Site", last_name="Admin", email="admin@example.org", role="admin"))
        self.session.flush()
        return profiles

    def seed_groups(self, count: int, profiles: list) -> None:
        for name in GROUP_NAMES[:count]:
            group = self._add(VolunteerGroup(name=name, description=fake.sentence()))
            self.session.flush()
            for profile in random.sample(profiles, k=random.randint(0, min(8, len(profiles)))):
                self._add(VolunteerGroupMembership(volunteer_id=profile.id, group_id=group.id))

    def seed_events(self, count: int, profiles: list) -> None:
        for _ in range(count):
            day = self.today - timedelta(days=random.randint(-14, 180))
            hour, minute = random.choice(SHIFT_STARTS)
            event = self._add(Event(
                title=random.choice(EVENT_NAMES),
                description=fake.paragraph(),
                location=f"{fake.street_address()}, {fake.city()}",
                start_date=local_to_absolute(day.year, day.month, day.day, hour, minute).replace(tzinfo=None),
            ))
            self.session.flush()

            for _ in range(random.randint(1, 4)):
                start_hour, start_minute = random.choice(SHIFT_STARTS)
                start = local_to_absolute(day.year, day.month, day.day, start_hour, start_minute)
                length = random.choice([2, 3, 4])
                shift = self._add(Shift(
                    event_id=event.id,
                    title=f"{start_hour:02d}:{start_minute:02d} shift",
                    start_time=start.replace(tzinfo=None),
                    end_time=(start + timedelta(hours=length)).replace(tzinfo=None),
                    capacity=random.randint(4, 20),
                ))
                self.session.flush()
                self.seed_assignments(shift, day, length, profiles)

    def seed_assignments(self, shift: Shift, day: date, length: int, profiles: list) -> None:
        past = day <= self.today
        for profile in random.sample(profiles, k=random.randint(0, min(6, len(profiles)))):
            if past:
                status = random.choice([AssignmentStatus.completed] * 4 + [AssignmentStatus.no_show])
            else:
                status = AssignmentStatus.registered
            hours = Decimal(length) if status == AssignmentStatus.completed else None
            self._add(VolunteerAssignment(
                volunteer_id=profile.id,
                shift_id=shift.id,
                status=status,
                hours_logged=hours,
                created_at=shift.start_time - timedelta(days=random.randint(1, 20)),
            ))
            if hours is not None:
                verified = random.random() < 0.8
                self._add(HourLog(
                    volunteer_id=profile.id,
                    hours=hours,
                    log_date=day,
                    description=f"{shift.title} ({length}h)",
                    verified_at=(shift.end_time + timedelta(days=2)) if verified else None,
                ))


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the database with volunteer activity data"
    )
    parser.add_argument("--volunteers", type=int, default=40, help="Number of volunteer profiles")
    parser.add_argument("--events", type=int, default=12, help="Number of events")
    parser.add_argument("--groups", type=int, default=5, help="Number of groups")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable data")
    parser.add_argument("--test", action="store_true", help="Minimal dataset (5 volunteers, 3 events, 2 groups)")
    args = parser.parse_args()

    if args.test:
        args.volunteers, args.events, args.groups = 5, 3, 2
    if args.seed is not None:
        random.seed(args.seed)
        Faker.seed(args.seed)

    create_db_and_tables()

    with Session(engine) as session:
        seeder = ActivitySeeder(session, today=date.today())
        profiles = seeder.seed_profiles(args.volunteers)
        seeder.seed_groups(args.groups, profiles)
        seeder.seed_events(args.events, profiles)
        session.commit()

    print(f"\n{Colors.BOLD}{Colors.GREEN}Seeding complete{Colors.RESET}")
    for entity, count in sorted(seeder.created.items()):
        print(f"  {Colors.CYAN}{entity:<28}{Colors.RESET} {count}")


if __name__ == "__main__":
    main()
