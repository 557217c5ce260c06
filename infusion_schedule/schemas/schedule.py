"""Request and response schemas for the bag schedule API."""

import re
from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator

from infusion_schedule.core.bag_schedule.constants import MAX_BAGS
from infusion_schedule.core.bag_schedule.enums import DisconnectAlert
from infusion_schedule.core.bag_schedule.models import (
    Bag,
    BagAlert,
    CycleSpec,
    MonthGrid,
)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _coerce_override(value: Any) -> int | None:
    """Read an override slot the way the intake form does.

    The leading whole number wins ("7", "7.0" and "7 days" are all 7);
    blank or non-numeric slots mean "Auto".
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


class BagTimes(BaseModel):
    """Clinician-entered "bag change due at" times ("HH:MM")."""

    bags: list[str | None] = Field(default_factory=list, max_length=MAX_BAGS)
    disconnect: str | None = None


class PatientSnapshot(BaseModel):
    """A patient's schedule inputs as stored by the patient record system.

    Date and cycle-length fields arrive as entered on the intake form and
    may be blank or malformed; the schedule service treats such a patient
    as not yet configured instead of failing.
    """

    patient_id: str | None = None
    name: str | None = None
    total_cycle_days: int | str | None = None
    cycle_start_date: str | None = Field(
        default=None, description="Hospital infusion start date (YYYY-MM-DD)."
    )
    schedule_start_date: str | None = Field(
        default=None, description="Home infusion program start date (YYYY-MM-DD)."
    )
    is_preservative_free: bool = False
    bag_overrides: list[int | None] = Field(
        default_factory=list,
        max_length=MAX_BAGS,
        description="Per-bag duration overrides; null means automatic.",
    )
    bag_times: BagTimes = Field(default_factory=BagTimes)
    rn_visit_flags: list[bool | None] = Field(
        default_factory=list, max_length=MAX_BAGS
    )
    bag_change_by: str | None = Field(
        default=None,
        description='Who changes the bags, e.g. "RN" or "Pt/CG".',
    )
    nursing_visit_plan: str | None = None
    nursing_visit_day: str | None = None

    @field_validator("bag_overrides", mode="before")
    @classmethod
    def coerce_overrides(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_coerce_override(v) for v in value]
        return value


class PolicyResponse(BaseModel):
    enable_5_day_bags: bool
    enable_6_day_bags: bool
    allowed_durations: list[int]
    preservative_free_durations: list[int]


class PartitionRequest(BaseModel):
    remaining_days: int
    overrides: list[int | None] = Field(default_factory=list, max_length=MAX_BAGS)
    is_preservative_free: bool = False

    @field_validator("overrides", mode="before")
    @classmethod
    def coerce_overrides(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_coerce_override(v) for v in value]
        return value


class PartitionResponse(BaseModel):
    durations: list[int]
    bag_count: int
    total_days: int


class DisconnectInfo(BaseModel):
    due_date: date | None = None
    due_time: str | None = None
    alert: DisconnectAlert = DisconnectAlert.none
    message: str | None = None


class PatientSchedule(BaseModel):
    """Derived bag schedule and alert state for one patient."""

    patient_id: str | None = None
    name: str | None = None
    configured: bool
    cycle: CycleSpec | None = None
    remaining_days: int | None = None
    bags: list[Bag] = Field(default_factory=list)
    alerts: list[BagAlert] = Field(default_factory=list)
    disconnect: DisconnectInfo = Field(default_factory=DisconnectInfo)
    row_needs_attention: bool = False


class CalendarResponse(BaseModel):
    """Everything needed to print one patient's bag change calendar."""

    patient_id: str | None = None
    name: str | None = None
    total_cycle_days: int | None = None
    schedule_start_date: date | None = None
    final_disconnect: date | None = None
    nursing_visit_summary: str | None = None
    months: list[MonthGrid] = Field(default_factory=list)


class BoardRequest(BaseModel):
    patients: list[PatientSnapshot]


class BoardRow(BaseModel):
    patient_id: str | None = None
    name: str | None = None
    configured: bool
    row_needs_attention: bool
    bag_count: int
    final_disconnect: date | None = None
    disconnect_alert: DisconnectAlert = DisconnectAlert.none


class BoardResponse(BaseModel):
    rows: list[BoardRow]
    count: int
    needs_attention_count: int
