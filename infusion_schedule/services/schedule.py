"""Bag schedule service.

Builds a patient's derived schedule from the snapshot stored by the
patient record system. This is the only place raw form values are
interpreted; everything below it works on validated CycleSpec values.

Nothing here raises for bad patient data. A patient whose cycle dates or
length cannot be read is returned as not configured, with no bags.
"""

from collections.abc import Sequence
from datetime import date, timedelta

from infusion_schedule.core.bag_schedule import (
    CycleSpec,
    PolicyFlags,
    classify,
    materialize,
    partition,
    project,
)
from infusion_schedule.logging_config import get_logger, patient_id_ctx
from infusion_schedule.schemas.schedule import (
    BoardRow,
    CalendarResponse,
    DisconnectInfo,
    PatientSchedule,
    PatientSnapshot,
)
from infusion_schedule.services.nursing_visit import nursing_visit_summary

logger = get_logger(__name__)


def parse_local_date(value: str | None) -> date | None:
    """Parse a Y-M-D form value; None if blank or malformed.

    Month and day need not be zero padded ("2026-1-5"). Anything after a
    "T" (an ISO timestamp) is ignored.
    """
    if not value:
        return None
    text = value.strip().split("T", 1)[0]
    try:
        year, month, day = (int(part) for part in text.split("-"))
        return date(year, month, day)
    except ValueError:
        return None


def parse_cycle_days(value: int | str | None) -> int | None:
    """Parse the cycle length; None unless it is a positive whole number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        days = int(str(value).strip())
    except ValueError:
        return None
    return days if days > 0 else None


def cycle_from_snapshot(snapshot: PatientSnapshot) -> CycleSpec | None:
    total_days = parse_cycle_days(snapshot.total_cycle_days)
    cycle_start = parse_local_date(snapshot.cycle_start_date)
    schedule_start = parse_local_date(snapshot.schedule_start_date)

    if total_days is None or cycle_start is None or schedule_start is None:
        return None

    cycle = CycleSpec(
        total_cycle_days=total_days,
        cycle_start_date=cycle_start,
        schedule_start_date=schedule_start,
        is_preservative_free=snapshot.is_preservative_free,
    )
    if not _end_is_representable(cycle):
        return None
    return cycle


def _end_is_representable(cycle: CycleSpec) -> bool:
    """The final disconnect must fall on or before 9999-12-31."""
    if cycle.remaining_days <= 0:
        return True
    try:
        cycle.schedule_start_date + timedelta(days=cycle.remaining_days)
    except OverflowError:
        return False
    return True


def _unconfigured(snapshot: PatientSnapshot) -> PatientSchedule:
    return PatientSchedule(
        patient_id=snapshot.patient_id,
        name=snapshot.name,
        configured=False,
    )


def build_schedule(
    snapshot: PatientSnapshot,
    policy: PolicyFlags,
    today: date,
) -> PatientSchedule:
    """Compute bags, alerts and disconnect for one patient.

    Args:
        snapshot: Patient schedule inputs.
        policy: Bag size policy flags.
        today: Reference date for alert classification.

    Returns:
        PatientSchedule. ``configured`` is False when the cycle fields
        are missing or malformed.
    """
    token = patient_id_ctx.set(snapshot.patient_id)
    try:
        cycle = cycle_from_snapshot(snapshot)
        if cycle is None:
            logger.info("Schedule not configured; cycle fields missing or invalid")
            return _unconfigured(snapshot)

        remaining = cycle.remaining_days
        durations: list[int] = []
        if remaining > 0:
            durations = partition(
                remaining,
                snapshot.bag_overrides,
                cycle.is_preservative_free,
                policy.enable_5_day_bags,
                policy.enable_6_day_bags,
            )

        bags = materialize(
            cycle.schedule_start_date,
            durations,
            change_times=snapshot.bag_times.bags,
        )
        result = classify(
            bags,
            snapshot.bag_change_by,
            snapshot.rn_visit_flags,
            today=today,
        )

        logger.debug(
            "Schedule computed",
            remaining_days=remaining,
            bag_count=len(bags),
            row_needs_attention=result.row_needs_attention,
        )

        return PatientSchedule(
            patient_id=snapshot.patient_id,
            name=snapshot.name,
            configured=True,
            cycle=cycle,
            remaining_days=remaining,
            bags=bags,
            alerts=result.per_bag,
            disconnect=DisconnectInfo(
                due_date=result.disconnect_date,
                due_time=snapshot.bag_times.disconnect or None,
                alert=result.disconnect,
                message=result.disconnect_message,
            ),
            row_needs_attention=result.row_needs_attention,
        )
    finally:
        patient_id_ctx.reset(token)


def last_bag_date(
    snapshot: PatientSnapshot, policy: PolicyFlags, today: date
) -> date | None:
    """Day the final bag comes down, or None if there is no schedule."""
    return build_schedule(snapshot, policy, today).disconnect.due_date


def build_calendar(
    snapshot: PatientSnapshot,
    policy: PolicyFlags,
    today: date,
) -> CalendarResponse:
    """Month grids and header details for the printed schedule."""
    schedule = build_schedule(snapshot, policy, today)
    final_disconnect = schedule.disconnect.due_date

    return CalendarResponse(
        patient_id=schedule.patient_id,
        name=schedule.name,
        total_cycle_days=schedule.cycle.total_cycle_days if schedule.cycle else None,
        schedule_start_date=(
            schedule.cycle.schedule_start_date if schedule.cycle else None
        ),
        final_disconnect=final_disconnect,
        nursing_visit_summary=nursing_visit_summary(
            snapshot.bag_change_by,
            snapshot.nursing_visit_plan,
            snapshot.nursing_visit_day,
        ),
        months=project(schedule.bags, final_disconnect, schedule.alerts),
    )


def rank_patients(
    snapshots: Sequence[PatientSnapshot],
    policy: PolicyFlags,
    today: date,
    *,
    include_unconfigured: bool = False,
) -> list[BoardRow]:
    """Board rows with patients needing attention first.

    Order is otherwise preserved (stable sort), so the caller's own
    ordering (e.g. by name) survives within each group.
    """
    rows = []
    for snapshot in snapshots:
        schedule = build_schedule(snapshot, policy, today)
        if not schedule.configured and not include_unconfigured:
            continue
        rows.append(
            BoardRow(
                patient_id=schedule.patient_id,
                name=schedule.name,
                configured=schedule.configured,
                row_needs_attention=schedule.row_needs_attention,
                bag_count=len(schedule.bags),
                final_disconnect=schedule.disconnect.due_date,
                disconnect_alert=schedule.disconnect.alert,
            )
        )

    return sorted(rows, key=lambda row: not row.row_needs_attention)
