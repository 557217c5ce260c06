"""Bag schedule router.

Stateless endpoints: the caller posts a patient snapshot and gets the
derived schedule back. Nothing is stored.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from infusion_schedule.config import clinic_today, get_policy_flags, settings
from infusion_schedule.core.bag_schedule import (
    PolicyFlags,
    allowed_durations,
    partition,
)
from infusion_schedule.logging_config import get_logger
from infusion_schedule.schemas.schedule import (
    BoardRequest,
    BoardResponse,
    CalendarResponse,
    PartitionRequest,
    PartitionResponse,
    PatientSchedule,
    PatientSnapshot,
    PolicyResponse,
)
from infusion_schedule.services.schedule import (
    build_calendar,
    build_schedule,
    rank_patients,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/schedule", tags=["schedule"])


def get_reference_date(
    as_of: date | None = Query(
        default=None,
        description="Date to treat as today. Defaults to the clinic's current date.",
    ),
) -> date:
    return as_of or clinic_today()


@router.get("/policy", response_model=PolicyResponse)
async def get_policy(
    policy: PolicyFlags = Depends(get_policy_flags),
) -> PolicyResponse:
    """Active bag size policy and the override choices it allows."""
    return PolicyResponse(
        enable_5_day_bags=policy.enable_5_day_bags,
        enable_6_day_bags=policy.enable_6_day_bags,
        allowed_durations=allowed_durations(
            False, policy.enable_5_day_bags, policy.enable_6_day_bags
        ),
        preservative_free_durations=allowed_durations(True),
    )


@router.post("/partition", response_model=PartitionResponse)
async def preview_partition(
    body: PartitionRequest,
    policy: PolicyFlags = Depends(get_policy_flags),
) -> PartitionResponse:
    """Bag durations for a number of remaining days, without dates.

    Zero or negative ``remaining_days`` returns an empty list.
    """
    durations = partition(
        body.remaining_days,
        body.overrides,
        body.is_preservative_free,
        policy.enable_5_day_bags,
        policy.enable_6_day_bags,
    )
    return PartitionResponse(
        durations=durations,
        bag_count=len(durations),
        total_days=sum(durations),
    )


@router.post("", response_model=PatientSchedule)
async def compute_schedule(
    body: PatientSnapshot,
    policy: PolicyFlags = Depends(get_policy_flags),
    today: date = Depends(get_reference_date),
) -> PatientSchedule:
    """Bags, per-bag alerts and final disconnect for one patient."""
    return build_schedule(body, policy, today)


@router.post("/calendar", response_model=CalendarResponse)
async def compute_calendar(
    body: PatientSnapshot,
    policy: PolicyFlags = Depends(get_policy_flags),
    today: date = Depends(get_reference_date),
) -> CalendarResponse:
    """Printable month grids for one patient's bag changes."""
    return build_calendar(body, policy, today)


@router.post("/board", response_model=BoardResponse)
async def compute_board(
    body: BoardRequest,
    include_unconfigured: bool = Query(default=False),
    policy: PolicyFlags = Depends(get_policy_flags),
    today: date = Depends(get_reference_date),
) -> BoardResponse:
    """Schedule board rows, patients needing attention first."""
    if len(body.patients) > settings.max_board_patients:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Too many patients: {len(body.patients)}. "
                f"Maximum is {settings.max_board_patients}."
            ),
        )

    rows = rank_patients(
        body.patients,
        policy,
        today,
        include_unconfigured=include_unconfigured,
    )
    needs_attention = sum(1 for row in rows if row.row_needs_attention)

    logger.info(
        "Schedule board computed",
        patients=len(body.patients),
        rows=len(rows),
        needs_attention=needs_attention,
    )

    return BoardResponse(
        rows=rows,
        count=len(rows),
        needs_attention_count=needs_attention,
    )
