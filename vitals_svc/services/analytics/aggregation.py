"""
Aggregate statistics over vital record sets.

Means are rounded half-up (120.5 -> 121), never with banker's rounding:
integer fields to whole numbers, temperature to one decimal place.

An empty record set has no aggregate. Every function here returns None
(or an empty summary) for it instead of raising, because "no data yet" is
the normal state for a new owner.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, List, Optional, Sequence

from models.vital_record import VitalRecord


def round_half_up(value: float, places: int = 0) -> float:
    """
    Round half away from zero at the given number of decimal places.

    >>> round_half_up(77.5)
    78.0
    >>> round_half_up(98.65, 1)
    98.7
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _mean(values: Sequence[float]) -> float:
    return math.fsum(values) / len(values)


def _round_int(value: float) -> int:
    return int(round_half_up(value))


def _round_temperature(value: float) -> float:
    return round_half_up(value, 1)


# Field name -> extractor for every aggregated measurement.
_FIELDS: Dict[str, Callable[[VitalRecord], float]] = {
    "systolic": lambda r: r.systolic,
    "diastolic": lambda r: r.diastolic,
    "heart_rate": lambda r: r.heart_rate,
    "spo2": lambda r: r.spo2,
    "temperature": lambda r: r.temperature,
    "weight": lambda r: r.weight,
}


def _rounder(field_name: str) -> Callable[[float], Any]:
    return _round_temperature if field_name == "temperature" else _round_int


@dataclass(frozen=True)
class AggregateVitals:
    """Mean of each measurement over a non-empty record set."""

    systolic: int
    diastolic: int
    heart_rate: int
    spo2: int
    temperature: float
    weight: int
    record_count: int

    @property
    def blood_pressure(self) -> str:
        return f"{self.systolic}/{self.diastolic}"


@dataclass(frozen=True)
class FieldStatistics:
    """Range and mean of a single measurement."""

    min: float
    max: float
    avg: float


@dataclass(frozen=True)
class VitalsStatistics:
    """Per-field min/max/avg over a non-empty record set."""

    systolic: FieldStatistics
    diastolic: FieldStatistics
    heart_rate: FieldStatistics
    spo2: FieldStatistics
    temperature: FieldStatistics
    weight: FieldStatistics
    record_count: int

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            name: {"min": stats.min, "max": stats.max, "avg": stats.avg}
            for name, stats in (
                (field_name, getattr(self, field_name)) for field_name in _FIELDS
            )
        }


@dataclass(frozen=True)
class VitalsSummary:
    """Headline numbers for a record set (counts, covered dates, averages)."""

    total_records: int
    first_timestamp: Optional[datetime]
    last_timestamp: Optional[datetime]
    date_range: str
    averages: Optional[AggregateVitals]


def aggregate(records: Sequence[VitalRecord]) -> Optional[AggregateVitals]:
    """
    Arithmetic mean of each measurement.

    Returns:
        AggregateVitals, or None when ``records`` is empty.
    """
    if not records:
        return None

    means = {
        name: _rounder(name)(_mean([extract(r) for r in records]))
        for name, extract in _FIELDS.items()
    }
    return AggregateVitals(record_count=len(records), **means)


def statistics(records: Sequence[VitalRecord]) -> Optional[VitalsStatistics]:
    """
    Min, max and mean of each measurement.

    Returns:
        VitalsStatistics, or None when ``records`` is empty.
    """
    if not records:
        return None

    per_field: Dict[str, FieldStatistics] = {}
    for name, extract in _FIELDS.items():
        values: List[float] = [extract(r) for r in records]
        per_field[name] = FieldStatistics(
            min=min(values),
            max=max(values),
            avg=_rounder(name)(_mean(values)),
        )
    return VitalsStatistics(record_count=len(records), **per_field)


def _display_date(date_string: str) -> str:
    parsed = date.fromisoformat(date_string)
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def summarize(records: Sequence[VitalRecord]) -> VitalsSummary:
    """Total count, covered date range and averages of a record set."""
    if not records:
        return VitalsSummary(
            total_records=0,
            first_timestamp=None,
            last_timestamp=None,
            date_range="No data",
            averages=None,
        )

    ordered = sorted(records, key=lambda r: r.timestamp)
    first, last = ordered[0], ordered[-1]
    return VitalsSummary(
        total_records=len(records),
        first_timestamp=first.timestamp,
        last_timestamp=last.timestamp,
        date_range=f"{_display_date(first.date)} - {_display_date(last.date)}",
        averages=aggregate(records),
    )
