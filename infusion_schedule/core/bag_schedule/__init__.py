"""Bag duration scheduling engine.

Turns a treatment cycle into a schedule of infusion bag changes:

1. partition  - remaining days -> bag durations (overrides, policy flags)
2. materialize - durations -> dated bags with volume and pump rate
3. classify   - bags -> today/tomorrow alerts and row attention flag
4. project    - bags + alerts -> printable month grids

All four are pure functions of their arguments. They never raise for
data problems; an unusable input gives an empty schedule.

IMPORTANT: This engine is a scheduling aid. It does not decide dosing
and does not check that overrides are clinically appropriate. Every
projected schedule must be reviewed by clinical staff.
"""

from infusion_schedule.core.bag_schedule.alerts import classify, is_caregiver_managed
from infusion_schedule.core.bag_schedule.calendar_grid import project
from infusion_schedule.core.bag_schedule.enums import (
    AlertState,
    CalendarEventKind,
    DisconnectAlert,
)
from infusion_schedule.core.bag_schedule.materializer import (
    disconnect_date,
    materialize,
)
from infusion_schedule.core.bag_schedule.models import (
    Bag,
    BagAlert,
    CalendarCell,
    CalendarEvent,
    ClassificationResult,
    CycleSpec,
    MonthGrid,
    PolicyFlags,
)
from infusion_schedule.core.bag_schedule.partitioner import (
    allowed_durations,
    partition,
)

__all__ = [
    "AlertState",
    "Bag",
    "BagAlert",
    "CalendarCell",
    "CalendarEvent",
    "CalendarEventKind",
    "ClassificationResult",
    "CycleSpec",
    "DisconnectAlert",
    "MonthGrid",
    "PolicyFlags",
    "allowed_durations",
    "classify",
    "disconnect_date",
    "is_caregiver_managed",
    "materialize",
    "partition",
    "project",
]
