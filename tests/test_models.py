import pytest
from datetime import date, datetime, timedelta
from sqlmodel import Session, select
from decimal import Decimal

from app.models.volunteer import (
    Profile, HourLog, VolunteerGroup, VolunteerGroupMembership, VOLUNTEER_ROLE
)
from app.models.event import (
    Event, Shift, VolunteerAssignment, AssignmentStatus, ACTIVE_ASSIGNMENT_STATUSES
)

class TestProfileModel:
    def test_create_profile(self, session: Session):
        profile = Profile(
            first_name="Ana",
            last_name="Lopez",
            email="ana@example.com",
            role=VOLUNTEER_ROLE
        )

        session.add(profile)
        session.commit()
        session.refresh(profile)

        assert profile.id is not None
        assert profile.full_name == "Ana Lopez"
        assert profile.created_at is not None

    def test_full_name_with_missing_parts(self):
        assert Profile(first_name="Ana").full_name == "Ana"
        assert Profile(last_name="Lopez").full_name == "Lopez"
        assert Profile().full_name == ""

    def test_legacy_profile_without_role(self, session: Session):
        profile = Profile(first_name="Old", last_name="Record", email="old@example.com")
        session.add(profile)
        session.commit()
        session.refresh(profile)

        assert profile.role is None

class TestHourLogModel:
    def test_create_hour_log(self, session: Session, factory):
        volunteer = factory.volunteer("Ana", "Lopez")
        log = HourLog(
            volunteer_id=volunteer.id,
            hours=Decimal("2.50"),
            log_date=date(2024, 7, 15),
            description="Sorted donations"
        )

        session.add(log)
        session.commit()
        session.refresh(log)

        assert log.id is not None
        assert log.hours == Decimal("2.50")
        assert log.is_verified is False

    def test_verified_hour_log(self, factory):
        volunteer = factory.volunteer("Ana", "Lopez")
        log = factory.hours(volunteer, 3, verified=True)

        assert log.is_verified is True
        assert log.volunteer.id == volunteer.id

class TestGroupModels:
    def test_group_membership(self, session: Session, factory):
        ana = factory.volunteer("Ana", "Lopez")
        ben = factory.volunteer("Ben", "Okafor")
        group = factory.group("Youth Corps", members=[ana, ben])

        session.refresh(group)
        assert {m.volunteer_id for m in group.memberships} == {ana.id, ben.id}

    def test_membership_unique_per_group(self, session: Session, factory):
        ana = factory.volunteer("Ana", "Lopez")
        group = factory.group("Youth Corps", members=[ana])

        session.add(VolunteerGroupMembership(volunteer_id=ana.id, group_id=group.id))

        with pytest.raises(Exception):  # Should raise integrity error
            session.commit()

class TestEventModels:
    def test_event_with_shifts(self, session: Session, factory):
        event = factory.event("Mobile Pantry")
        factory.shift(event)
        factory.shift(event, start_time=event.start_date + timedelta(hours=4))

        session.refresh(event)
        assert len(event.shifts) == 2
        assert all(s.end_time > s.start_time for s in event.shifts)

    def test_assignment_defaults(self, session: Session, factory):
        volunteer = factory.volunteer("Ana", "Lopez")
        shift = factory.shift(factory.event())
        assignment = VolunteerAssignment(volunteer_id=volunteer.id, shift_id=shift.id)

        session.add(assignment)
        session.commit()
        session.refresh(assignment)

        assert assignment.status == AssignmentStatus.registered
        assert assignment.hours_logged is None
        assert assignment.created_at is not None

    def test_status_round_trip(self, session: Session, factory):
        volunteer = factory.volunteer("Ana", "Lopez")
        shift = factory.shift(factory.event())
        factory.assignment(volunteer, shift, status=AssignmentStatus.no_show)

        stored = session.exec(select(VolunteerAssignment)).one()
        assert stored.status == AssignmentStatus.no_show

    def test_active_statuses_exclude_no_show(self):
        assert AssignmentStatus.no_show not in ACTIVE_ASSIGNMENT_STATUSES
        assert set(ACTIVE_ASSIGNMENT_STATUSES) == {
            AssignmentStatus.registered,
            AssignmentStatus.checked_in,
            AssignmentStatus.completed,
        }
