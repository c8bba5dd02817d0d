"""
Domain model for vital-sign records.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional

from core.datetime_utils import capture_date_string, format_iso, normalize_timestamp

# Fields a partial update may touch. Identity, owner and capture time are fixed.
UPDATABLE_FIELDS = ("systolic", "diastolic", "heart_rate", "spo2", "temperature", "weight")


@dataclass
class VitalRecord:
    """
    One timestamped measurement snapshot for an owner.

    ``timestamp`` is always a timezone-aware UTC datetime and is the only
    ordering key. ``date`` is the owner's local calendar date at capture time
    (YYYY-MM-DD) and is what day-level grouping and chart labels use.
    """

    owner_id: str
    systolic: int
    diastolic: int
    heart_rate: int
    spo2: int
    temperature: float
    weight: int
    timestamp: datetime
    date: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.date:
            self.date = capture_date_string(self.timestamp)
        self.timestamp = normalize_timestamp(self.timestamp)

    @property
    def blood_pressure(self) -> str:
        """Blood pressure as displayed, e.g. '120/80'."""
        return f"{self.systolic}/{self.diastolic}"

    def with_changes(self, changes: Dict[str, Any]) -> "VitalRecord":
        """Return a copy with the given updatable fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if k in UPDATABLE_FIELDS})

    def to_dict(self) -> Dict[str, Any]:
        """Convert record to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "systolic": self.systolic,
            "diastolic": self.diastolic,
            "heart_rate": self.heart_rate,
            "spo2": self.spo2,
            "temperature": self.temperature,
            "weight": self.weight,
            "timestamp": format_iso(self.timestamp),
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VitalRecord":
        """
        Create a record from a stored or exported mapping.

        Accepts both the flat layout produced by ``to_dict`` and the nested
        ``bloodPressure``/camelCase layout used by mobile exports. The
        timestamp may be in any shape ``normalize_timestamp`` understands.
        """
        blood_pressure = data.get("bloodPressure") or {}
        raw_timestamp = data["timestamp"]
        return cls(
            id=data.get("id"),
            owner_id=data.get("owner_id") or data.get("email") or "",
            systolic=int(data.get("systolic", blood_pressure.get("systolic"))),
            diastolic=int(data.get("diastolic", blood_pressure.get("diastolic"))),
            heart_rate=int(data.get("heart_rate", data.get("heartRate"))),
            spo2=int(data.get("spo2", data.get("spO2"))),
            temperature=float(data["temperature"]),
            weight=int(data["weight"]),
            timestamp=normalize_timestamp(raw_timestamp),
            date=data.get("date") or capture_date_string(raw_timestamp),
        )
