# app/schemas/report.py
"""Report schemas produced by the aggregation engine and consumed by exporters."""
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Union, Literal
from decimal import Decimal
import datetime as dt

from app.models.event import AssignmentStatus

NEVER = "Never"
NOT_AVAILABLE = "N/A"
UNKNOWN_VOLUNTEER = "Unknown"
INVERTED_RANGE = "start_date must be on or before end_date"

class ReportFilters(BaseModel):
    """Inclusive Eastern calendar date range applied to event start dates."""
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    @model_validator(mode="after")
    def validate_range(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError(INVERTED_RANGE)
        return self

class EventReport(BaseModel):
    event_id: int
    title: str
    date: Optional[dt.date] = Field(None, description="Eastern calendar date of the event start")
    location: str = ""
    total_hours: Decimal = Decimal("0")
    total_volunteers: int = Field(0, ge=0, description="Distinct volunteers with completed assignments")
    total_shifts: int = Field(0, ge=0)

    class Config:
        frozen = True

class VolunteerReport(BaseModel):
    volunteer_id: int
    name: str
    email: str = ""
    total_hours: Decimal = Field(Decimal("0"), description="Verified hours only")
    total_events: int = Field(0, ge=0, description="Distinct events across counted assignments")
    total_shifts: int = Field(0, ge=0, description="Counted assignments, not deduplicated")
    groups: List[str] = Field(default_factory=list)
    recent_activity: Union[dt.date, Literal["Never"]] = NEVER

    class Config:
        frozen = True

class GroupReport(BaseModel):
    group_id: int
    name: str
    total_volunteers: int = Field(0, ge=0)
    total_hours: Decimal = Decimal("0")
    average_hours_per_volunteer: int = 0
    most_active_volunteer: str = NOT_AVAILABLE

    class Config:
        frozen = True

class RecentShift(BaseModel):
    """One of a volunteer's latest assignments, with shift and event times in Eastern civil time."""
    assignment_id: int
    status: AssignmentStatus
    hours_logged: Optional[Decimal] = None
    assigned_on: Optional[dt.date] = Field(None, description="Eastern calendar date the assignment was created")
    shift_title: str = ""
    start_time: Optional[str] = Field(None, description="Eastern wall-clock start, YYYY-MM-DDTHH:MM")
    end_time: Optional[str] = Field(None, description="Eastern wall-clock end, YYYY-MM-DDTHH:MM")
    event_title: str = ""
    event_date: Optional[dt.date] = None
    event_location: str = ""

    class Config:
        frozen = True

class VolunteerSummary(BaseModel):
    """Single-volunteer activity summary, including hours still awaiting verification."""
    volunteer_id: int
    name: str
    email: str = ""
    total_hours: Decimal = Decimal("0")
    verified_hours: Decimal = Decimal("0")
    pending_hours: Decimal = Decimal("0")
    events_attended: int = Field(0, ge=0)
    average_hours_per_event: Decimal = Decimal("0")
    first_volunteer_date: Optional[dt.date] = None
    last_volunteer_date: Union[dt.date, Literal["Never"]] = NEVER
    days_since_last_activity: int = Field(0, ge=0)
    recent_shifts: List[RecentShift] = Field(default_factory=list, description="Latest assignments, newest first")

    class Config:
        frozen = True
