"""Alert classifier for a materialized bag schedule.

Decides which bag changes need action today or tomorrow and whether the
patient's row should be brought to the nurse's attention. Read-only: the
classifier never changes the bags it is given.
"""

from collections.abc import Sequence
from datetime import date, timedelta

from infusion_schedule.core.bag_schedule.constants import CAREGIVER_MARKER
from infusion_schedule.core.bag_schedule.enums import AlertState, DisconnectAlert
from infusion_schedule.core.bag_schedule.materializer import disconnect_date
from infusion_schedule.core.bag_schedule.models import (
    Bag,
    BagAlert,
    ClassificationResult,
)

STATE_MESSAGES: dict[AlertState, str] = {
    AlertState.aspiration_tomorrow: (
        "RN visit and line aspiration required for tomorrow's bag change. "
        "Call pt/cg for time remaining on pump and log bag change time."
    ),
    AlertState.aspiration_today: (
        "Confirm RN aware that aspiration of line is required when doing "
        "pump reprogram and bag change."
    ),
    AlertState.rn_visit_today: (
        "RN visit required for this bag change and pump reprogram."
    ),
    AlertState.rn_visit_tomorrow: "RN visit required for tomorrow's bag change.",
    AlertState.today_routine: "Bag change due today.",
    AlertState.tomorrow_routine: (
        "Call pt/cg today for remaining time on pump. Calculate and log time."
    ),
}

FIRST_HOOKUP_TODAY_MESSAGE = "First bag hookup. Please enter hookup time."
FIRST_HOOKUP_TOMORROW_MESSAGE = "Confirm hookup time w/ hospital or patient."
PUMP_REPROGRAM_MESSAGE = "Pump reprogram due today."
CAREGIVER_MESSAGE = "Pt/CG doing bag changes."

DISCONNECT_MESSAGES: dict[DisconnectAlert, str] = {
    DisconnectAlert.disconnect_today: "RN to be scheduled for disconnect visit.",
    DisconnectAlert.disconnect_tomorrow: (
        "Call pt/cg to determine remaining time on infusions. "
        "Calculate and log disconnect time."
    ),
}


def is_caregiver_managed(bag_change_by: str | None) -> bool:
    """True when the patient or a caregiver changes the bags."""
    if not bag_change_by:
        return False
    return CAREGIVER_MARKER in str(bag_change_by).lower()


def _flag_at(flags: Sequence[bool | None], index: int) -> bool:
    return index < len(flags) and bool(flags[index])


def _bag_state(
    *,
    aspiration: bool,
    rn_visit: bool,
    caregiver_managed: bool,
    is_today: bool,
    is_tomorrow: bool,
) -> AlertState:
    if aspiration and is_tomorrow:
        return AlertState.aspiration_tomorrow
    if aspiration and is_today:
        return AlertState.aspiration_today
    if rn_visit and is_today:
        return AlertState.rn_visit_today
    if rn_visit and is_tomorrow:
        return AlertState.rn_visit_tomorrow
    if not caregiver_managed and is_today:
        return AlertState.today_routine
    if not caregiver_managed and is_tomorrow:
        return AlertState.tomorrow_routine
    return AlertState.none


def _bag_message(
    state: AlertState,
    *,
    index: int,
    first_hookup_today: bool,
    pump_reprogram_today: bool,
    caregiver_managed: bool,
) -> str | None:
    # Routine changes on the first bag or a reprogram day get the
    # more specific instruction.
    if state in (AlertState.today_routine, AlertState.none):
        if first_hookup_today:
            return FIRST_HOOKUP_TODAY_MESSAGE
        if pump_reprogram_today:
            return PUMP_REPROGRAM_MESSAGE
    if state == AlertState.tomorrow_routine and index == 0:
        return FIRST_HOOKUP_TOMORROW_MESSAGE
    if state == AlertState.none:
        return CAREGIVER_MESSAGE if caregiver_managed else None
    return STATE_MESSAGES[state]


def _next_day(day: date) -> date | None:
    # date.max has no tomorrow
    if day == date.max:
        return None
    return day + timedelta(days=1)


def classify_disconnect(
    final_date: date | None, today: date
) -> DisconnectAlert:
    if final_date is None:
        return DisconnectAlert.none
    if final_date == today:
        return DisconnectAlert.disconnect_today
    if final_date == _next_day(today):
        return DisconnectAlert.disconnect_tomorrow
    return DisconnectAlert.none


def classify(
    bags: Sequence[Bag],
    bag_change_by: str | None,
    rn_visit_flags: Sequence[bool | None] = (),
    *,
    today: date,
) -> ClassificationResult:
    """Classify every bag change and the final disconnect.

    Args:
        bags: Materialized schedule, in order.
        bag_change_by: Free-text bag change responsibility ("Pt/CG",
            "RN", ...). Anything containing "pt" means the patient or a
            caregiver changes the bags.
        rn_visit_flags: Per-bag clinician request for an RN visit. Only
            meaningful for caregiver-managed patients; nurses already
            attend every change otherwise.
        today: Reference date for today/tomorrow decisions.

    Returns:
        ClassificationResult with one BagAlert per bag.
    """
    caregiver_managed = is_caregiver_managed(bag_change_by)
    tomorrow = _next_day(today)
    per_bag: list[BagAlert] = []

    for index, bag in enumerate(bags):
        prev = bags[index - 1] if index > 0 else None
        is_today = bag.start_date == today
        is_tomorrow = bag.start_date == tomorrow

        reprogram = prev is not None and bag.duration_days != prev.duration_days
        aspiration = prev is not None and bag.duration_days < prev.duration_days
        rn_visit = caregiver_managed and _flag_at(rn_visit_flags, index)

        state = _bag_state(
            aspiration=aspiration,
            rn_visit=rn_visit,
            caregiver_managed=caregiver_managed,
            is_today=is_today,
            is_tomorrow=is_tomorrow,
        )
        first_hookup_today = index == 0 and is_today
        pump_reprogram_today = reprogram and is_today

        per_bag.append(
            BagAlert(
                index=index,
                state=state,
                reprogram_required=reprogram,
                aspiration_required=aspiration,
                requires_rn_visit=aspiration or rn_visit,
                pump_reprogram_today=pump_reprogram_today,
                first_hookup_today=first_hookup_today,
                message=_bag_message(
                    state,
                    index=index,
                    first_hookup_today=first_hookup_today,
                    pump_reprogram_today=pump_reprogram_today,
                    caregiver_managed=caregiver_managed,
                ),
            )
        )

    final_date = disconnect_date(bags)
    disconnect = classify_disconnect(final_date, today)

    return ClassificationResult(
        per_bag=per_bag,
        disconnect_date=final_date,
        disconnect=disconnect,
        disconnect_message=DISCONNECT_MESSAGES.get(disconnect),
        row_needs_attention=(
            any(alert.needs_attention for alert in per_bag)
            or disconnect != DisconnectAlert.none
        ),
    )
