from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Union


class TimelinePointOut(BaseModel):
    label: str
    occupancy_percent: int

    class Config:
        from_attributes = True


class PeakHourOut(BaseModel):
    label: str
    vehicles: int

    class Config:
        from_attributes = True


class LongestSessionOut(BaseModel):
    slot_id: Union[int, str]
    license_plate: Optional[str]
    entry_time: datetime
    exit_time: datetime
    duration_minutes: float

    class Config:
        from_attributes = True


class WindowOut(BaseModel):
    start: datetime
    end: datetime

    class Config:
        from_attributes = True


class AnalyticsOut(BaseModel):
    period: str
    window: WindowOut
    previous_window: WindowOut
    capacity: int
    total_vehicles: int
    avg_duration_minutes: float
    occupancy_rate_percent: int
    peak_hour_label: str                 # "--:--" when no bucket is occupied
    peak_hour_vehicles: int
    vehicles_trend_percent: int
    duration_trend_percent: int
    occupancy_trend_percent: int
    timeline: list[TimelinePointOut]
    peak_hours: list[PeakHourOut]
    longest_sessions: list[LongestSessionOut]

    class Config:
        from_attributes = True
