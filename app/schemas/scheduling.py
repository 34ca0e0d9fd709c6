# app/schemas/scheduling.py
from pydantic import BaseModel, Field
from datetime import datetime

class LocalTimeRequest(BaseModel):
    local: str = Field(..., description="Eastern wall-clock time, YYYY-MM-DDTHH:MM", examples=["2024-07-15T14:30"])

class AbsoluteTimeRequest(BaseModel):
    absolute: datetime = Field(..., description="Absolute instant; naive values are read as UTC")

class CivilTimeConversion(BaseModel):
    local: str
    absolute: datetime
    utc_offset: str = Field(..., description="Offset applied, e.g. -04:00")
    is_daylight_saving: bool
    display: str = Field(..., description="12-hour Eastern clock time, e.g. 2:30 PM")
