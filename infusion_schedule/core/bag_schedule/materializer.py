"""Bag materializer: dates and clinical details for a list of durations."""

from collections.abc import Sequence
from datetime import date, timedelta

from infusion_schedule.core.bag_schedule.constants import BAG_DETAILS, BagDetails
from infusion_schedule.core.bag_schedule.models import Bag


def bag_details(duration_days: int) -> BagDetails | None:
    """Look up volume and rate for a bag size; None when the table has no row."""
    return BAG_DETAILS.get(duration_days)


def materialize(
    start_date: date,
    durations: Sequence[int],
    *,
    change_times: Sequence[str | None] | None = None,
) -> list[Bag]:
    """Lay bags end to end starting at ``start_date``.

    Each bag starts on the day the previous one ends. Durations without a
    volume/rate entry (5 and 6 days) get no details, which displays as TBD.

    Args:
        start_date: Day the first bag is hung.
        durations: Output of :func:`partition`.
        change_times: Optional "HH:MM" change time per bag position.
    """
    change_times = change_times or ()
    bags: list[Bag] = []
    current = start_date

    for index, duration in enumerate(durations):
        end = current + timedelta(days=duration)
        details = bag_details(duration)
        change_time = change_times[index] if index < len(change_times) else None

        bags.append(
            Bag(
                index=index,
                duration_days=duration,
                start_date=current,
                end_date=end,
                volume_ml=details.volume_ml if details else None,
                rate_ml_per_hr=details.rate_ml_per_hr if details else None,
                change_time=change_time or None,
            )
        )
        current = end

    return bags


def disconnect_date(bags: Sequence[Bag]) -> date | None:
    """Final disconnect is due when the last bag runs out."""
    if not bags:
        return None
    return bags[-1].end_date
