# app/routers/reports.py
from fastapi import APIRouter, Depends, Query, Request, HTTPException, status
from pydantic import ValidationError
from typing import Optional, List
from datetime import date
import logging

from app.schemas.report import (
    EventReport, VolunteerReport, GroupReport, VolunteerSummary, ReportFilters, INVERTED_RANGE
)
from app.services.report_service import ReportService
from app.services.source_result import SourceUnavailable

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
    responses={404: {"description": "Not found"}},
)

def get_report_service(request: Request) -> ReportService:
    """Report service created at application startup."""
    return request.app.state.report_service

def get_report_filters(
    start_date: Optional[date] = Query(None, description="First Eastern calendar day to include"),
    end_date: Optional[date] = Query(None, description="Last Eastern calendar day to include")
) -> ReportFilters:
    """Event date range from the query string; an inverted range is a 400."""
    try:
        return ReportFilters(start_date=start_date, end_date=end_date)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVERTED_RANGE
        )

def _unavailable(e: SourceUnavailable) -> HTTPException:
    logger.error(f"Report listing failed: {e}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Report data unavailable: {e.source}"
    )

@router.get("/events", response_model=List[EventReport])
async def get_event_reports(
    filters: ReportFilters = Depends(get_report_filters),
    service: ReportService = Depends(get_report_service)
):
    """Get per-event hours, volunteers and shifts, most recent event first."""
    try:
        return await service.generate_event_reports(
            start_date=filters.start_date, end_date=filters.end_date
        )
    except SourceUnavailable as e:
        raise _unavailable(e)

@router.get("/volunteers", response_model=List[VolunteerReport])
async def get_volunteer_reports(
    service: ReportService = Depends(get_report_service)
):
    """Get per-volunteer verified hours, events, shifts and groups."""
    try:
        return await service.generate_volunteer_reports()
    except SourceUnavailable as e:
        raise _unavailable(e)

@router.get("/volunteers/{volunteer_id}/summary", response_model=VolunteerSummary)
async def get_volunteer_summary(
    volunteer_id: int,
    as_of: Optional[date] = Query(None, description="Day to measure inactivity against (default: today)"),
    service: ReportService = Depends(get_report_service)
):
    """Get one volunteer's verified and pending hours and recent activity."""
    try:
        summary = await service.get_volunteer_summary(volunteer_id, as_of=as_of)
    except SourceUnavailable as e:
        raise _unavailable(e)
    if summary is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Volunteer not found"
        )
    return summary

@router.get("/groups", response_model=List[GroupReport])
async def get_group_reports(
    service: ReportService = Depends(get_report_service)
):
    """Get per-group membership, hours and most active volunteer."""
    try:
        return await service.generate_group_reports()
    except SourceUnavailable as e:
        raise _unavailable(e)
