"""
Pydantic schemas for vital record API operations.
"""
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from core.datetime_utils import format_iso
from models.vital_record import VitalRecord


def _round_temperature(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class VitalRecordCreate(BaseModel):
    """Schema for recording a new set of vital signs.

    All measurements are required. ``timestamp`` defaults to the time the
    request is received; when given with a UTC offset, the record's
    calendar ``date`` is taken in that offset.
    """
    systolic: int = Field(..., ge=0, le=300, description="Systolic pressure (mmHg)", example=120)
    diastolic: int = Field(..., ge=0, le=200, description="Diastolic pressure (mmHg)", example=80)
    heart_rate: int = Field(..., ge=0, le=300, description="Heart rate (BPM)", example=72)
    spo2: int = Field(..., ge=0, le=100, description="Blood oxygen saturation (%)", example=98)
    temperature: float = Field(..., gt=0, le=115, description="Body temperature (°F)", example=98.6)
    weight: int = Field(..., ge=0, le=1500, description="Body weight", example=165)
    timestamp: Optional[datetime] = Field(
        None,
        description="ISO format datetime when the measurement was taken (defaults to now)",
        example="2025-01-15T08:30:00-05:00"
    )

    @field_validator("temperature")
    @classmethod
    def round_temperature(cls, value: float) -> float:
        return _round_temperature(value)

    @model_validator(mode="after")
    def check_blood_pressure(self) -> "VitalRecordCreate":
        if self.diastolic > self.systolic:
            raise ValueError("Diastolic pressure cannot exceed systolic pressure")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "systolic": 120,
                "diastolic": 80,
                "heart_rate": 72,
                "spo2": 98,
                "temperature": 98.6,
                "weight": 165,
                "timestamp": "2025-01-15T08:30:00-05:00"
            }
        }


class VitalRecordUpdate(BaseModel):
    """Schema for a partial update of a record's measurements.

    Capture time and owner cannot be changed.
    """
    systolic: Optional[int] = Field(None, ge=0, le=300, description="Systolic pressure (mmHg)")
    diastolic: Optional[int] = Field(None, ge=0, le=200, description="Diastolic pressure (mmHg)")
    heart_rate: Optional[int] = Field(None, ge=0, le=300, description="Heart rate (BPM)")
    spo2: Optional[int] = Field(None, ge=0, le=100, description="Blood oxygen saturation (%)")
    temperature: Optional[float] = Field(None, gt=0, le=115, description="Body temperature (°F)")
    weight: Optional[int] = Field(None, ge=0, le=1500, description="Body weight")

    @field_validator("temperature")
    @classmethod
    def round_temperature(cls, value: Optional[float]) -> Optional[float]:
        return _round_temperature(value)

    @model_validator(mode="after")
    def check_blood_pressure(self) -> "VitalRecordUpdate":
        if self.systolic is not None and self.diastolic is not None and self.diastolic > self.systolic:
            raise ValueError("Diastolic pressure cannot exceed systolic pressure")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "heart_rate": 68,
                "temperature": 98.4
            }
        }


class VitalRecordResponse(BaseModel):
    """Schema for a stored vital record."""
    id: str = Field(..., description="Opaque record identifier", example="3f2a9c0e5b7d4e1f8a6c2b9d0e4f7a1c")
    systolic: int = Field(..., example=120)
    diastolic: int = Field(..., example=80)
    blood_pressure: str = Field(..., description="Display form of blood pressure", example="120/80")
    heart_rate: int = Field(..., example=72)
    spo2: int = Field(..., example=98)
    temperature: float = Field(..., example=98.6)
    weight: int = Field(..., example=165)
    timestamp: str = Field(..., description="ISO 8601 UTC capture time", example="2025-01-15T13:30:00Z")
    date: str = Field(..., description="Calendar date of capture (YYYY-MM-DD)", example="2025-01-15")

    class Config:
        from_attributes = True

    @classmethod
    def from_record(cls, record: VitalRecord) -> "VitalRecordResponse":
        return cls(
            id=record.id,
            systolic=record.systolic,
            diastolic=record.diastolic,
            blood_pressure=record.blood_pressure,
            heart_rate=record.heart_rate,
            spo2=record.spo2,
            temperature=record.temperature,
            weight=record.weight,
            timestamp=format_iso(record.timestamp),
            date=record.date,
        )


class DeleteAllResponse(BaseModel):
    """Schema for the bulk delete result."""
    deleted: int = Field(..., description="Number of records deleted", example=12)
