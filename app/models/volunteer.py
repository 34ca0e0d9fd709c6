# app/models/volunteer.py
from sqlmodel import SQLModel, Field, Relationship, Column, Text, UniqueConstraint
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import datetime as dt

VOLUNTEER_ROLE = "volunteer"

class Profile(SQLModel, table=True):
    __tablename__ = "profiles"

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255, index=True)
    # Legacy rows predate role tagging and carry no role at all
    role: Optional[str] = Field(default=None, max_length=20, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    hour_logs: List["HourLog"] = Relationship(back_populates="volunteer")
    group_memberships: List["VolunteerGroupMembership"] = Relationship(back_populates="volunteer")

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

class HourLog(SQLModel, table=True):
    __tablename__ = "hour_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    volunteer_id: int = Field(foreign_key="profiles.id", index=True)
    hours: Decimal = Field(..., max_digits=6, decimal_places=2, ge=0)
    log_date: dt.date = Field(..., index=True)
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    verified_at: Optional[datetime] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    volunteer: Profile = Relationship(back_populates="hour_logs")

    @property
    def is_verified(self) -> bool:
        return self.verified_at is not None

class VolunteerGroup(SQLModel, table=True):
    __tablename__ = "volunteer_groups"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, index=True)
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    memberships: List["VolunteerGroupMembership"] = Relationship(back_populates="group")

class VolunteerGroupMembership(SQLModel, table=True):
    __tablename__ = "volunteer_group_memberships"
    __table_args__ = (UniqueConstraint("volunteer_id", "group_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    volunteer_id: int = Field(foreign_key="profiles.id", index=True)
    group_id: int = Field(foreign_key="volunteer_groups.id", index=True)
    joined_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    volunteer: Profile = Relationship(back_populates="group_memberships")
    group: VolunteerGroup = Relationship(back_populates="memberships")
