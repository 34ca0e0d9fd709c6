# app/routers/scheduling.py
"""Conversions between Eastern wall-clock shift times and stored UTC instants."""
from fastapi import APIRouter, HTTPException, status
from datetime import datetime, timedelta, timezone

from app.core.civil_time import (
    LocalCivilDateTime, MalformedCivilTime, OUT_OF_RANGE, is_daylight_saving,
    parse_local_datetime, utc_offset_for, to_absolute, to_local_civil, format_local_clock
)
from app.schemas.scheduling import LocalTimeRequest, AbsoluteTimeRequest, CivilTimeConversion

router = APIRouter(
    prefix="/scheduling",
    tags=["scheduling"],
)

def _format_offset(offset: timedelta) -> str:
    total_minutes = int(offset.total_seconds() // 60)
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"

def _conversion(local: LocalCivilDateTime, absolute: datetime) -> CivilTimeConversion:
    return CivilTimeConversion(
        local=local.isoformat(),
        absolute=absolute,
        utc_offset=_format_offset(utc_offset_for(local.year, local.month, local.day)),
        is_daylight_saving=is_daylight_saving(local.year, local.month, local.day),
        display=format_local_clock(absolute),
    )

def _malformed(e: MalformedCivilTime) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=str(e)
    )

@router.post("/to-absolute", response_model=CivilTimeConversion)
def convert_to_absolute(request: LocalTimeRequest):
    """Convert an Eastern wall-clock time entered on a shift form to UTC for storage."""
    try:
        local = parse_local_datetime(request.local)
        return _conversion(local, to_absolute(local))
    except MalformedCivilTime as e:
        raise _malformed(e)

@router.post("/to-local", response_model=CivilTimeConversion)
def convert_to_local(request: AbsoluteTimeRequest):
    """Convert a stored instant to Eastern wall-clock time for editing and display."""
    absolute = request.absolute
    if absolute.tzinfo is None:
        absolute = absolute.replace(tzinfo=timezone.utc)
    try:
        absolute = absolute.astimezone(timezone.utc)
    except OverflowError:
        raise _malformed(MalformedCivilTime(request.absolute, OUT_OF_RANGE))
    try:
        return _conversion(to_local_civil(absolute), absolute)
    except MalformedCivilTime as e:
        raise _malformed(e)
