"""Calendar projector: month grids for the printed bag change schedule.

Only arranges what the materializer and classifier produced. Whether a
bag is a reprogram or needs an RN visit is read from its BagAlert.
"""

import calendar
from collections import defaultdict
from collections.abc import Sequence
from datetime import date

from infusion_schedule.core.bag_schedule.enums import CalendarEventKind
from infusion_schedule.core.bag_schedule.models import (
    Bag,
    BagAlert,
    BagEvent,
    CalendarCell,
    CalendarEvent,
    MonthGrid,
)

FINAL_DISCONNECT_MESSAGE = (
    "Final Disconnect - Cycle Complete. "
    "A nurse will be doing your final disconnect."
)

# Printed weeks run Sunday to Saturday
_CALENDAR = calendar.Calendar(firstweekday=calendar.SUNDAY)


def _month_starts(first: date, last: date) -> list[date]:
    months = []
    year, month = first.year, first.month
    while (year, month) <= (last.year, last.month):
        months.append(date(year, month, 1))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return months


def _bag_event(bag: Bag, alert: BagAlert | None) -> CalendarEvent:
    return CalendarEvent(
        kind=CalendarEventKind.bag,
        bag=BagEvent(
            label=bag.label,
            duration_days=bag.duration_days,
            volume=bag.volume,
            rate=bag.rate,
            is_reprogram=alert.reprogram_required if alert else False,
            requires_rn_visit=alert.requires_rn_visit if alert else False,
        ),
    )


def build_day_events(
    bags: Sequence[Bag],
    final_disconnect: date | None,
    alerts: Sequence[BagAlert] = (),
) -> dict[date, list[CalendarEvent]]:
    """Group bag starts and the final disconnect by calendar day."""
    alerts_by_index = {alert.index: alert for alert in alerts}
    events: dict[date, list[CalendarEvent]] = defaultdict(list)

    for bag in bags:
        events[bag.start_date].append(_bag_event(bag, alerts_by_index.get(bag.index)))

    if final_disconnect is not None:
        events[final_disconnect].append(
            CalendarEvent(
                kind=CalendarEventKind.final_disconnect,
                message=FINAL_DISCONNECT_MESSAGE,
            )
        )

    return dict(events)


def month_grid(
    year: int, month: int, day_events: dict[date, list[CalendarEvent]]
) -> MonthGrid:
    # Day numbers rather than dates: slots outside the month are 0, so no
    # neighbouring date is built (there is none after 9999-12-31).
    weeks = []
    for week in _CALENDAR.monthdayscalendar(year, month):
        cells = []
        for day_number in week:
            if day_number == 0:
                cells.append(None)
                continue
            day = date(year, month, day_number)
            cells.append(CalendarCell(date=day, events=day_events.get(day, [])))
        weeks.append(cells)

    return MonthGrid(
        year=year,
        month=month,
        title=f"{calendar.month_name[month]} {year}",
        weeks=weeks,
    )


def project(
    bags: Sequence[Bag],
    final_disconnect: date | None,
    alerts: Sequence[BagAlert] = (),
    month_range: tuple[date, date] | None = None,
) -> list[MonthGrid]:
    """Project a schedule onto printable month grids.

    Args:
        bags: Materialized bags.
        final_disconnect: Day the last bag comes down.
        alerts: Classifier output, matched to bags by index.
        month_range: Optional (first, last) dates whose months bound the
            output. Defaults to the first bag start through the final
            disconnect.

    Returns:
        One MonthGrid per month, oldest first. Empty when there are no bags.
    """
    if not bags:
        return []

    day_events = build_day_events(bags, final_disconnect, alerts)

    if month_range is None:
        first = min(bag.start_date for bag in bags)
        last = max(day_events)
    else:
        first, last = month_range

    return [
        month_grid(start.year, start.month, day_events)
        for start in _month_starts(first, last)
    ]
