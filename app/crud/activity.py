# app/crud/activity.py
"""Read projections over activity tables used by the reporting engine."""
from sqlmodel import Session, select, or_, col
from typing import List, Optional, Sequence, Tuple
from datetime import datetime, timezone

from app.models.event import Event, Shift, VolunteerAssignment, AssignmentStatus
from app.models.volunteer import (
    Profile, HourLog, VolunteerGroup, VolunteerGroupMembership, VOLUNTEER_ROLE
)

def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Columns hold naive UTC; compare with naive values
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

class ActivityCRUD:

    def list_events(
        self,
        db: Session,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[Event]:
        """Events starting in [start, end), most recent first. Missing bounds are open."""
        query = select(Event)
        if start is not None:
            query = query.where(Event.start_date >= _naive_utc(start))
        if end is not None:
            query = query.where(Event.start_date < _naive_utc(end))
        query = query.order_by(col(Event.start_date).desc(), Event.id)
        return list(db.exec(query).all())

    def list_shifts_for_event(self, db: Session, event_id: int) -> List[Shift]:
        query = select(Shift).where(Shift.event_id == event_id).order_by(Shift.start_time, Shift.id)
        return list(db.exec(query).all())

    def list_assignments_for_shifts(
        self,
        db: Session,
        shift_ids: Sequence[int],
        statuses: Sequence[AssignmentStatus] = (AssignmentStatus.completed,)
    ) -> List[VolunteerAssignment]:
        if not shift_ids:
            return []
        query = (
            select(VolunteerAssignment)
            .where(col(VolunteerAssignment.shift_id).in_(list(shift_ids)))
            .where(col(VolunteerAssignment.status).in_(list(statuses)))
            .order_by(VolunteerAssignment.id)
        )
        return list(db.exec(query).all())

    def list_assignments_for_volunteer(
        self,
        db: Session,
        volunteer_id: int,
        statuses: Optional[Sequence[AssignmentStatus]] = None
    ) -> List[Tuple[VolunteerAssignment, Optional[int]]]:
        """Volunteer's assignments paired with the event id of the owning shift."""
        query = (
            select(VolunteerAssignment, Shift.event_id)
            .join(Shift, VolunteerAssignment.shift_id == Shift.id, isouter=True)
            .where(VolunteerAssignment.volunteer_id == volunteer_id)
        )
        if statuses is not None:
            query = query.where(col(VolunteerAssignment.status).in_(list(statuses)))
        query = query.order_by(VolunteerAssignment.id)
        return [(assignment, event_id) for assignment, event_id in db.exec(query).all()]

    def get_latest_assignment(self, db: Session, volunteer_id: int) -> Optional[VolunteerAssignment]:
        """Most recently created assignment of any status."""
        query = (
            select(VolunteerAssignment)
            .where(VolunteerAssignment.volunteer_id == volunteer_id)
            .order_by(col(VolunteerAssignment.created_at).desc(), col(VolunteerAssignment.id).desc())
            .limit(1)
        )
        return db.exec(query).first()

    def list_recent_shifts(
        self,
        db: Session,
        volunteer_id: int,
        limit: int = 10
    ) -> List[Tuple[VolunteerAssignment, Optional[Shift], Optional[Event]]]:
        """Latest assignments of any status with their shift and event, newest first."""
        query = (
            select(VolunteerAssignment, Shift, Event)
            .join(Shift, VolunteerAssignment.shift_id == Shift.id, isouter=True)
            .join(Event, Shift.event_id == Event.id, isouter=True)
            .where(VolunteerAssignment.volunteer_id == volunteer_id)
            .order_by(col(VolunteerAssignment.created_at).desc(), col(VolunteerAssignment.id).desc())
            .limit(limit)
        )
        return [(assignment, shift, event) for assignment, shift, event in db.exec(query).all()]

    def list_hour_logs(
        self,
        db: Session,
        volunteer_ids: Sequence[int],
        verified_only: bool = True
    ) -> List[HourLog]:
        if not volunteer_ids:
            return []
        query = select(HourLog).where(col(HourLog.volunteer_id).in_(list(volunteer_ids)))
        if verified_only:
            query = query.where(col(HourLog.verified_at).is_not(None))
        query = query.order_by(HourLog.id)
        return list(db.exec(query).all())

    def list_volunteer_profiles(self, db: Session) -> List[Profile]:
        query = select(Profile).where(Profile.role == VOLUNTEER_ROLE).order_by(Profile.id)
        return list(db.exec(query).all())

    def list_legacy_volunteer_profiles(self, db: Session) -> List[Profile]:
        """Volunteers including legacy profiles that were never tagged with a role."""
        query = (
            select(Profile)
            .where(or_(col(Profile.role).is_(None), Profile.role == VOLUNTEER_ROLE))
            .order_by(Profile.id)
        )
        return list(db.exec(query).all())

    def get_profile(self, db: Session, profile_id: int) -> Optional[Profile]:
        return db.exec(select(Profile).where(Profile.id == profile_id)).first()

    def list_profiles(self, db: Session, profile_ids: Sequence[int]) -> List[Profile]:
        if not profile_ids:
            return []
        query = select(Profile).where(col(Profile.id).in_(list(profile_ids))).order_by(Profile.id)
        return list(db.exec(query).all())

    def list_groups(self, db: Session) -> List[VolunteerGroup]:
        return list(db.exec(select(VolunteerGroup).order_by(VolunteerGroup.id)).all())

    def list_group_member_ids(self, db: Session, group_id: int) -> List[int]:
        query = (
            select(VolunteerGroupMembership.volunteer_id)
            .where(VolunteerGroupMembership.group_id == group_id)
            .order_by(VolunteerGroupMembership.id)
        )
        return list(db.exec(query).all())

    def list_group_names_for_volunteer(self, db: Session, volunteer_id: int) -> List[str]:
        query = (
            select(VolunteerGroup.name)
            .join(VolunteerGroupMembership, VolunteerGroupMembership.group_id == VolunteerGroup.id)
            .where(VolunteerGroupMembership.volunteer_id == volunteer_id)
            .order_by(VolunteerGroup.name, VolunteerGroup.id)
        )
        return list(db.exec(query).all())

activity_crud = ActivityCRUD()
