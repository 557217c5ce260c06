"""Bag schedule Pydantic models.

Pure value objects for the scheduling engine. No I/O, no framework
dependencies beyond pydantic. Every model is frozen: a schedule is
rebuilt from scratch whenever its inputs change, never edited in place.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, computed_field

from infusion_schedule.core.bag_schedule.constants import TBD
from infusion_schedule.core.bag_schedule.enums import (
    AlertState,
    CalendarEventKind,
    DisconnectAlert,
)


class PolicyFlags(BaseModel):
    """Process-wide bag size policy, shared read-only by all patients."""

    model_config = ConfigDict(frozen=True)

    enable_5_day_bags: bool = False
    enable_6_day_bags: bool = False


class CycleSpec(BaseModel):
    """One patient's treatment cycle.

    ``cycle_start_date`` is when the hospital started the infusion;
    ``schedule_start_date`` is when the home infusion program takes over.
    Days the hospital already covered are not scheduled again.
    """

    model_config = ConfigDict(frozen=True)

    total_cycle_days: int = Field(gt=0)
    cycle_start_date: date
    schedule_start_date: date
    is_preservative_free: bool = False

    @property
    def days_elapsed(self) -> int:
        return max(0, (self.schedule_start_date - self.cycle_start_date).days)

    @property
    def remaining_days(self) -> int:
        return self.total_cycle_days - self.days_elapsed


class Bag(BaseModel):
    """A single infusion bag interval.

    ``end_date`` is exclusive: it is the day the next bag (or the final
    disconnect) is due.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    duration_days: int = Field(ge=1)
    start_date: date
    end_date: date
    volume_ml: int | None = None
    rate_ml_per_hr: float | None = None
    change_time: str | None = None

    @computed_field
    @property
    def label(self) -> str:
        return f"Bag {self.index + 1}"

    @computed_field
    @property
    def volume(self) -> str:
        if self.volume_ml is None:
            return TBD
        return f"{self.volume_ml}ml"

    @computed_field
    @property
    def rate(self) -> str:
        if self.rate_ml_per_hr is None:
            return TBD
        return f"{self.rate_ml_per_hr:g}ml/hr"


class BagAlert(BaseModel):
    """Classifier output for one bag."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    state: AlertState = AlertState.none
    # Date-independent transition facts, also used by the printed calendar
    reprogram_required: bool = False
    aspiration_required: bool = False
    requires_rn_visit: bool = False
    # Due today
    pump_reprogram_today: bool = False
    first_hookup_today: bool = False
    message: str | None = None

    @computed_field
    @property
    def urgent(self) -> bool:
        return self.state == AlertState.aspiration_tomorrow

    @computed_field
    @property
    def needs_attention(self) -> bool:
        return (
            self.state != AlertState.none
            or self.pump_reprogram_today
            or self.first_hookup_today
        )


class ClassificationResult(BaseModel):
    """Per-bag and per-row alert state for one patient."""

    model_config = ConfigDict(frozen=True)

    per_bag: list[BagAlert] = Field(default_factory=list)
    disconnect_date: date | None = None
    disconnect: DisconnectAlert = DisconnectAlert.none
    disconnect_message: str | None = None
    row_needs_attention: bool = False


class BagEvent(BaseModel):
    """Payload of a bag-start calendar event."""

    model_config = ConfigDict(frozen=True)

    label: str
    duration_days: int
    volume: str
    rate: str
    is_reprogram: bool = False
    requires_rn_visit: bool = False


class CalendarEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: CalendarEventKind
    bag: BagEvent | None = None
    message: str | None = None


class CalendarCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    events: list[CalendarEvent] = Field(default_factory=list)


class MonthGrid(BaseModel):
    """One printable month: weeks of seven slots, Sunday first.

    Slots outside the month are ``None``.
    """

    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=1, le=12)
    title: str
    weeks: list[list[CalendarCell | None]] = Field(default_factory=list)
