import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool
from datetime import date, datetime, timedelta
from decimal import Decimal

from app.main import app
from app.core.civil_time import local_to_absolute
from app.routers.reports import get_report_service
from app.crud.activity import ActivityCRUD
from app.services.report_service import ReportService
from app.models.event import Event, Shift, VolunteerAssignment, AssignmentStatus
from app.models.volunteer import (
    Profile, HourLog, VolunteerGroup, VolunteerGroupMembership, VOLUNTEER_ROLE
)

def eastern(year, month, day, hour=0, minute=0) -> datetime:
    """Naive UTC datetime, as stored, for an Eastern wall-clock time."""
    return local_to_absolute(year, month, day, hour, minute).replace(tzinfo=None)

# Test database setup
@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()

@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session

@pytest.fixture(name="report_service")
def report_service_fixture(engine):
    # One worker: the in-memory database lives on a single shared connection
    service = ReportService(lambda: Session(engine), max_concurrent_reads=1)
    yield service
    service.close()

@pytest.fixture(name="client")
def client_fixture(report_service: ReportService):
    app.dependency_overrides[get_report_service] = lambda: report_service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


class ActivityFactory:
    """Builds activity rows for report tests."""

    def __init__(self, session: Session):
        self.session = session

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def volunteer(self, first_name="Test", last_name="Volunteer", email=None,
                  role=VOLUNTEER_ROLE, created_at=None) -> Profile:
        return self._save(Profile(
            first_name=first_name,
            last_name=last_name,
            email=email if email is not None else f"{first_name}.{last_name}@example.com".lower(),
            role=role,
            created_at=created_at or datetime(2024, 1, 1, 12, 0),
        ))

    def event(self, title="Mobile Pantry", start_date=None, location="Main Street Church") -> Event:
        return self._save(Event(
            title=title,
            location=location,
            start_date=start_date or eastern(2024, 7, 15, 9, 0),
        ))

    def shift(self, event: Event, start_time=None, hours=3) -> Shift:
        start_time = start_time or event.start_date
        return self._save(Shift(
            event_id=event.id,
            title="Shift",
            start_time=start_time,
            end_time=start_time + timedelta(hours=hours),
        ))

    def assignment(self, volunteer: Profile, shift: Shift,
                   status=AssignmentStatus.completed, hours_logged=None,
                   created_at=None) -> VolunteerAssignment:
        return self._save(VolunteerAssignment(
            volunteer_id=volunteer.id,
            shift_id=shift.id,
            status=status,
            hours_logged=Decimal(str(hours_logged)) if hours_logged is not None else None,
            created_at=created_at or datetime(2024, 7, 1, 15, 0),
        ))

    def hours(self, volunteer: Profile, hours, verified=True, log_date=None) -> HourLog:
        return self._save(HourLog(
            volunteer_id=volunteer.id,
            hours=Decimal(str(hours)),
            log_date=log_date or date(2024, 7, 15),
            verified_at=datetime(2024, 7, 20, 12, 0) if verified else None,
        ))

    def group(self, name, members=()) -> VolunteerGroup:
        group = self._save(VolunteerGroup(name=name))
        for member in members:
            self._save(VolunteerGroupMembership(volunteer_id=member.id, group_id=group.id))
        return group


class FailingCRUD(ActivityCRUD):
    """Activity reads with the named projections raising ConnectionError."""

    def __init__(self, failing=()):
        self.failing = set(failing)

    def __getattribute__(self, name):
        if name != "failing" and name in object.__getattribute__(self, "failing"):
            def fail(*args, **kwargs):
                raise ConnectionError(f"{name} unavailable")
            return fail
        return object.__getattribute__(self, name)


@pytest.fixture(name="factory")
def factory_fixture(session: Session):
    return ActivityFactory(session)
