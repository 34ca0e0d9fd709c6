# app/models/event.py
from sqlmodel import SQLModel, Field, Relationship, Column, Text
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from enum import Enum

class AssignmentStatus(str, Enum):
    registered = "registered"
    checked_in = "checked_in"
    completed = "completed"
    no_show = "no_show"

# Assignments that count as participation in volunteer reports
ACTIVE_ASSIGNMENT_STATUSES = (
    AssignmentStatus.registered,
    AssignmentStatus.checked_in,
    AssignmentStatus.completed,
)

class Event(SQLModel, table=True):
    __tablename__ = "events"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=200, index=True)
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    location: Optional[str] = Field(default=None, max_length=200)
    # Stored as naive UTC
    start_date: datetime = Field(..., index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    shifts: List["Shift"] = Relationship(back_populates="event")

class Shift(SQLModel, table=True):
    __tablename__ = "shifts"

    id: Optional[int] = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="events.id", index=True)
    title: str = Field(default="", max_length=200)
    start_time: datetime = Field(...)
    end_time: datetime = Field(...)
    capacity: Optional[int] = Field(default=None, ge=0)
    location: Optional[str] = Field(default=None, max_length=200)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    event: Event = Relationship(back_populates="shifts")
    assignments: List["VolunteerAssignment"] = Relationship(back_populates="shift")

class VolunteerAssignment(SQLModel, table=True):
    __tablename__ = "volunteer_assignments"

    id: Optional[int] = Field(default=None, primary_key=True)
    volunteer_id: int = Field(foreign_key="profiles.id", index=True)
    shift_id: int = Field(foreign_key="shifts.id", index=True)
    status: AssignmentStatus = Field(default=AssignmentStatus.registered, index=True)
    hours_logged: Optional[Decimal] = Field(default=None, max_digits=6, decimal_places=2, ge=0)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)

    # Relationships
    shift: Shift = Relationship(back_populates="assignments")
