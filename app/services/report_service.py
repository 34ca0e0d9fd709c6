# app/services/report_service.py
"""
Reporting aggregation engine.

Builds event, volunteer and group reports from raw activity rows. Each entity
under report fans out its reads concurrently on a bounded thread pool (one
session per read) and waits only for its own reads. A failed read degrades
the affected field to its empty default instead of failing the batch.
"""
import asyncio
import functools
import logging
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlmodel import Session

from app.core.civil_time import civil_day_bounds, local_date_of, to_local_civil
from app.crud.activity import ActivityCRUD, activity_crud
from app.models.event import (
    ACTIVE_ASSIGNMENT_STATUSES, AssignmentStatus, Event, Shift, VolunteerAssignment
)
from app.models.volunteer import Profile, VolunteerGroup
from app.schemas.report import (
    EventReport, VolunteerReport, GroupReport, VolunteerSummary, RecentShift,
    NEVER, NOT_AVAILABLE, UNKNOWN_VOLUNTEER
)
from app.services.source_result import (
    SourceResult, fetch_source, fetch_with_fallback
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
RECENT_SHIFT_LIMIT = 10


def to_decimal(value: Any) -> Decimal:
    """Hours as Decimal; missing values count as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def sum_hours(values: Iterable[Any]) -> Decimal:
    return sum((to_decimal(v) for v in values), ZERO)


def round_half_up(value: Decimal, places: str = "1") -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


def display_name(profile: Optional[Profile]) -> str:
    if profile is None:
        return UNKNOWN_VOLUNTEER
    return profile.full_name or profile.email or UNKNOWN_VOLUNTEER


def civil_date_or_none(instant: Optional[datetime], source: str) -> Optional[date]:
    """Eastern calendar date of an instant; a bad value is logged and skipped."""
    if instant is None:
        return None
    try:
        return local_date_of(instant)
    except (TypeError, ValueError, OverflowError) as e:
        logger.warning(f"Could not convert {source} timestamp {instant!r}: {e}")
        return None


def civil_time_or_none(instant: Optional[datetime], source: str) -> Optional[str]:
    """Eastern wall-clock text of an instant; a bad value is logged and skipped."""
    if instant is None:
        return None
    try:
        return to_local_civil(instant).isoformat()
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not convert {source} timestamp {instant!r}: {e}")
        return None


def recent_shift(
    assignment: VolunteerAssignment,
    shift: Optional[Shift],
    event: Optional[Event]
) -> RecentShift:
    label = f"assignment {assignment.id}"
    return RecentShift(
        assignment_id=assignment.id,
        status=assignment.status,
        hours_logged=assignment.hours_logged,
        assigned_on=civil_date_or_none(assignment.created_at, label),
        shift_title=shift.title if shift is not None else "",
        start_time=civil_time_or_none(shift.start_time, label) if shift is not None else None,
        end_time=civil_time_or_none(shift.end_time, label) if shift is not None else None,
        event_title=event.title if event is not None else "",
        event_date=civil_date_or_none(event.start_date, label) if event is not None else None,
        event_location=(event.location or "") if event is not None else "",
    )


def pick_most_active(hours_by_volunteer: Dict[int, Decimal], names: Dict[int, str]) -> str:
    """
    Name of the member with the most hours.

    Ties go to the lexicographically smallest name, then the smallest id.
    """
    if not hours_by_volunteer:
        return NOT_AVAILABLE
    top = max(hours_by_volunteer.values())
    tied = [vid for vid, hours in hours_by_volunteer.items() if hours == top]
    winner = min(tied, key=lambda vid: (names.get(vid, UNKNOWN_VOLUNTEER), vid))
    return names.get(winner, UNKNOWN_VOLUNTEER)


class ReportService:
    """Produces reports from the activity store. Safe to share across requests."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        max_concurrent_reads: int = 8,
        sub_read_timeout: Optional[float] = None,
        crud: ActivityCRUD = activity_crud
    ):
        self._session_factory = session_factory
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_concurrent_reads),
            thread_name_prefix="report-read"
        )
        self._timeout = sub_read_timeout
        self._crud = crud

    def close(self):
        """Release worker threads. In-flight reads finish and are discarded."""
        self._executor.shutdown(wait=False)

    # ------------------------------------------------------------------
    # Read plumbing
    # ------------------------------------------------------------------

    def _read(self, fn: Callable[..., Any], *args: Any) -> Any:
        with self._session_factory() as db:
            return fn(db, *args)

    async def _submit(self, source: str, call: Callable[[], SourceResult]) -> SourceResult:
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(self._executor, call)
        if self._timeout is None:
            return await future
        try:
            return await asyncio.wait_for(future, self._timeout)
        except asyncio.TimeoutError as e:
            return SourceResult.failure(source, e)

    async def _fetch(self, source: str, fn: Callable[..., Any], *args: Any) -> SourceResult:
        """Run one repository read off the event loop, capturing failure."""
        return await self._submit(
            source, functools.partial(fetch_source, source, self._read, fn, *args)
        )

    # ------------------------------------------------------------------
    # Event reports
    # ------------------------------------------------------------------

    async def generate_event_reports(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[EventReport]:
        """
        Per-event totals for events starting within an inclusive Eastern date range.

        Args:
            start_date: First calendar day to include (None = unbounded)
            end_date: Last calendar day to include (None = unbounded)

        Returns:
            Reports ordered by event start, most recent first

        Raises:
            SourceUnavailable: If the event listing itself cannot be read
        """
        lower, upper = civil_day_bounds(start_date, end_date)
        events: List[Event] = (await self._fetch("events", self._crud.list_events, lower, upper)).unwrap()

        reports = await asyncio.gather(*(self._event_report(event) for event in events))
        ordered = sorted(zip(events, reports), key=lambda pair: pair[0].start_date, reverse=True)

        logger.info(f"Generated {len(ordered)} event reports")
        return [report for _, report in ordered]

    async def _event_report(self, event: Event) -> EventReport:
        shifts = (await self._fetch(
            f"shifts[event={event.id}]", self._crud.list_shifts_for_event, event.id
        )).unwrap_or([])
        shift_ids = [shift.id for shift in shifts]

        assignments = (await self._fetch(
            f"assignments[event={event.id}]",
            self._crud.list_assignments_for_shifts,
            shift_ids,
            (AssignmentStatus.completed,)
        )).unwrap_or([])

        return EventReport(
            event_id=event.id,
            title=event.title,
            date=civil_date_or_none(event.start_date, f"event {event.id}"),
            location=event.location or "",
            total_hours=sum_hours(a.hours_logged for a in assignments),
            total_volunteers=len({a.volunteer_id for a in assignments}),
            total_shifts=len(shifts),
        )

    # ------------------------------------------------------------------
    # Volunteer reports
    # ------------------------------------------------------------------

    def _list_volunteers(self) -> SourceResult:
        return fetch_with_fallback(
            "volunteers",
            [
                ("by_role", functools.partial(self._read, self._crud.list_volunteer_profiles)),
                ("legacy", functools.partial(self._read, self._crud.list_legacy_volunteer_profiles)),
            ],
            accept=bool,
        )

    async def generate_volunteer_reports(self) -> List[VolunteerReport]:
        """
        Per-volunteer totals, ordered by verified hours (highest first).

        Volunteers with equal hours keep their listing order.

        Raises:
            SourceUnavailable: If no volunteer listing could be read
        """
        volunteers: List[Profile] = (await self._submit("volunteers", self._list_volunteers)).unwrap()

        reports = await asyncio.gather(*(self._volunteer_report(v) for v in volunteers))
        ordered = sorted(reports, key=lambda report: report.total_hours, reverse=True)

        logger.info(f"Generated {len(ordered)} volunteer reports")
        return ordered

    async def _volunteer_report(self, volunteer: Profile) -> VolunteerReport:
        vid = volunteer.id
        hour_logs, assignments, group_names, latest = await asyncio.gather(
            self._fetch(f"hour_logs[volunteer={vid}]", self._crud.list_hour_logs, [vid], True),
            self._fetch(
                f"assignments[volunteer={vid}]",
                self._crud.list_assignments_for_volunteer,
                vid,
                ACTIVE_ASSIGNMENT_STATUSES
            ),
            self._fetch(f"groups[volunteer={vid}]", self._crud.list_group_names_for_volunteer, vid),
            self._fetch(f"latest_assignment[volunteer={vid}]", self._crud.get_latest_assignment, vid),
        )

        counted = assignments.unwrap_or([])
        latest_assignment = latest.unwrap_or(None)
        recent = None
        if latest_assignment is not None:
            recent = civil_date_or_none(latest_assignment.created_at, f"assignment {latest_assignment.id}")

        return VolunteerReport(
            volunteer_id=vid,
            name=volunteer.full_name or UNKNOWN_VOLUNTEER,
            email=volunteer.email or "",
            total_hours=sum_hours(log.hours for log in hour_logs.unwrap_or([])),
            total_events=len({event_id for _, event_id in counted if event_id is not None}),
            total_shifts=len(counted),
            groups=sorted(set(group_names.unwrap_or([]))),
            recent_activity=recent or NEVER,
        )

    # ------------------------------------------------------------------
    # Group reports
    # ------------------------------------------------------------------

    async def generate_group_reports(self) -> List[GroupReport]:
        """
        Per-group totals, ordered by verified hours (highest first).

        Raises:
            SourceUnavailable: If the group listing itself cannot be read
        """
        groups: List[VolunteerGroup] = (await self._fetch("groups", self._crud.list_groups)).unwrap()

        reports = await asyncio.gather(*(self._group_report(group) for group in groups))
        ordered = sorted(reports, key=lambda report: report.total_hours, reverse=True)

        logger.info(f"Generated {len(ordered)} group reports")
        return ordered

    async def _group_report(self, group: VolunteerGroup) -> GroupReport:
        members = (await self._fetch(
            f"members[group={group.id}]", self._crud.list_group_member_ids, group.id
        )).unwrap_or([])
        member_ids = list(OrderedDict.fromkeys(members))

        if not member_ids:
            return GroupReport(
                group_id=group.id,
                name=group.name,
                total_volunteers=0,
                total_hours=ZERO,
                average_hours_per_volunteer=0,
                most_active_volunteer=NOT_AVAILABLE,
            )

        hour_logs, profiles = await asyncio.gather(
            self._fetch(f"hour_logs[group={group.id}]", self._crud.list_hour_logs, member_ids, True),
            self._fetch(f"profiles[group={group.id}]", self._crud.list_profiles, member_ids),
        )

        member_set = set(member_ids)
        hours_by_volunteer: Dict[int, Decimal] = {}
        for log in hour_logs.unwrap_or([]):
            if log.volunteer_id in member_set:
                hours_by_volunteer[log.volunteer_id] = (
                    hours_by_volunteer.get(log.volunteer_id, ZERO) + to_decimal(log.hours)
                )
        total_hours = sum(hours_by_volunteer.values(), ZERO)
        names = {profile.id: display_name(profile) for profile in profiles.unwrap_or([])}

        return GroupReport(
            group_id=group.id,
            name=group.name,
            total_volunteers=len(member_ids),
            total_hours=total_hours,
            average_hours_per_volunteer=int(round_half_up(total_hours / len(member_ids))),
            most_active_volunteer=pick_most_active(hours_by_volunteer, names),
        )

    # ------------------------------------------------------------------
    # Single volunteer summary
    # ------------------------------------------------------------------

    async def get_volunteer_summary(
        self,
        volunteer_id: int,
        as_of: Optional[date] = None
    ) -> Optional[VolunteerSummary]:
        """
        Activity summary for one volunteer, including unverified hours.

        Args:
            volunteer_id: Profile ID
            as_of: Eastern calendar date to measure inactivity against (default: today)

        Returns:
            The summary, or None if the volunteer does not exist

        Raises:
            SourceUnavailable: If the profile itself cannot be read
        """
        profile: Optional[Profile] = (await self._fetch(
            f"profile[volunteer={volunteer_id}]", self._crud.get_profile, volunteer_id
        )).unwrap()
        if profile is None:
            return None

        hour_logs, assignments, recent = await asyncio.gather(
            self._fetch(f"hour_logs[volunteer={volunteer_id}]", self._crud.list_hour_logs, [volunteer_id], False),
            self._fetch(
                f"assignments[volunteer={volunteer_id}]",
                self._crud.list_assignments_for_volunteer,
                volunteer_id,
                None
            ),
            self._fetch(
                f"recent_shifts[volunteer={volunteer_id}]",
                self._crud.list_recent_shifts,
                volunteer_id,
                RECENT_SHIFT_LIMIT
            ),
        )

        logs = hour_logs.unwrap_or([])
        total_hours = sum_hours(log.hours for log in logs)
        verified_hours = sum_hours(log.hours for log in logs if log.verified_at is not None)

        rows = assignments.unwrap_or([])
        events_attended = len({event_id for _, event_id in rows if event_id is not None})
        average = ZERO
        if events_attended:
            average = round_half_up(total_hours / events_attended, "0.01")

        last_date = None
        created = [a.created_at for a, _ in rows if a.created_at is not None]
        if created:
            last_date = civil_date_or_none(max(created), f"volunteer {volunteer_id} activity")

        days_since = 0
        if last_date is not None:
            today = as_of or local_date_of(datetime.now(timezone.utc))
            days_since = max(0, (today - last_date).days)

        return VolunteerSummary(
            volunteer_id=profile.id,
            name=profile.full_name or UNKNOWN_VOLUNTEER,
            email=profile.email or "",
            total_hours=total_hours,
            verified_hours=verified_hours,
            pending_hours=total_hours - verified_hours,
            events_attended=events_attended,
            average_hours_per_event=average,
            first_volunteer_date=civil_date_or_none(profile.created_at, f"volunteer {volunteer_id} profile"),
            last_volunteer_date=last_date or NEVER,
            days_since_last_activity=days_since,
            recent_shifts=[recent_shift(*row) for row in recent.unwrap_or([])],
        )
