# Business Logic Services
from infusion_schedule.services.nursing_visit import nursing_visit_summary
from infusion_schedule.services.schedule import (
    build_calendar,
    build_schedule,
    cycle_from_snapshot,
    last_bag_date,
    rank_patients,
)

__all__ = [
    "build_calendar",
    "build_schedule",
    "cycle_from_snapshot",
    "last_bag_date",
    "nursing_visit_summary",
    "rank_patients",
]
