"""
Week-over-week trends and blood pressure classification.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence

from core.datetime_utils import to_utc, utc_now
from models.vital_record import VitalRecord
from services.analytics.aggregation import aggregate, round_half_up
from services.analytics.filtering import filter_by_range

logger = logging.getLogger(__name__)

TREND_WEEK_DAYS = 7


@dataclass(frozen=True)
class VitalTrends:
    """Change in each average between the previous week and the last week."""
    systolic: int
    diastolic: int
    heart_rate: int
    spo2: int
    temperature: float
    weight: int


@dataclass(frozen=True)
class BloodPressureStatus:
    label: str
    color: str


BP_NORMAL = BloodPressureStatus("Normal", "#10B981")
BP_ELEVATED = BloodPressureStatus("Elevated", "#F59E0B")
BP_HIGH_STAGE_1 = BloodPressureStatus("High Stage 1", "#F97316")
BP_HIGH_STAGE_2 = BloodPressureStatus("High Stage 2", "#EF4444")


def classify_blood_pressure(systolic: float, diastolic: float) -> BloodPressureStatus:
    """
    Blood pressure category of a single reading.

    >>> classify_blood_pressure(118, 76).label
    'Normal'
    >>> classify_blood_pressure(135, 85).label
    'High Stage 1'
    """
    if systolic < 120 and diastolic < 80:
        return BP_NORMAL
    if systolic < 130 and diastolic < 80:
        return BP_ELEVATED
    if systolic < 140 or diastolic < 90:
        return BP_HIGH_STAGE_1
    return BP_HIGH_STAGE_2


def calculate_trends(
    records: Sequence[VitalRecord],
    now: Optional[datetime] = None,
) -> Optional[VitalTrends]:
    """
    Week-over-week change of each average.

    Compares the mean of the last 7 days with the mean of the 7 days before
    that. Returns None when either week has no records.
    """
    now = to_utc(now) if now is not None else utc_now()
    boundary = now - timedelta(days=TREND_WEEK_DAYS)

    last_week = filter_by_range(records, TREND_WEEK_DAYS, now)
    previous_week = [
        record for record in filter_by_range(records, TREND_WEEK_DAYS * 2, now)
        if record.timestamp < boundary
    ]

    current = aggregate(last_week)
    previous = aggregate(previous_week)
    if current is None or previous is None:
        return None

    return VitalTrends(
        systolic=current.systolic - previous.systolic,
        diastolic=current.diastolic - previous.diastolic,
        heart_rate=current.heart_rate - previous.heart_rate,
        spo2=current.spo2 - previous.spo2,
        temperature=round_half_up(current.temperature - previous.temperature, 1),
        weight=current.weight - previous.weight,
    )
