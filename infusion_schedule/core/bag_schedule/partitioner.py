"""Bag duration partitioner.

Splits the remaining days of a cycle into an ordered list of bag
durations. Clinician overrides win when they are allowed for the patient;
every other bag comes from the greedy remainder rule, which fills whole
weeks last so the odd-sized bags are hung first.
"""

from collections.abc import Sequence

from infusion_schedule.core.bag_schedule.constants import (
    BASE_BAG_DURATIONS,
    FIVE_DAY_BAG,
    FULL_WEEK_DAYS,
    MAX_BAGS,
    MAX_UNSPLIT_REMAINDER,
    PRESERVATIVE_FREE_DURATIONS,
    SIX_DAY_BAG,
    SPLIT_REMAINDERS,
)
from infusion_schedule.logging_config import get_logger

logger = get_logger(__name__)


def allowed_durations(
    is_preservative_free: bool,
    enable_5: bool = False,
    enable_6: bool = False,
) -> list[int]:
    """Return the bag durations a clinician may choose for this patient.

    Preservative-free patients are limited to 1-day bags whatever the
    policy flags say.
    """
    if is_preservative_free:
        return sorted(PRESERVATIVE_FREE_DURATIONS)

    allowed = set(BASE_BAG_DURATIONS)
    if enable_5:
        allowed.add(FIVE_DAY_BAG)
    if enable_6:
        allowed.add(SIX_DAY_BAG)
    return sorted(allowed)


def greedy_duration(remaining_days: int) -> int:
    """Pick the next bag size when no override applies.

    Policy table, reproduced as-is:

    - up to 4 days left: hang one bag for all of it
    - 5 days left: 2 (then 3), even when 5-day bags are enabled
    - 6 days left: 3 (then 3), even when 6-day bags are enabled
    - a multiple of 7: a 7-day bag
    - otherwise the remainder modulo 7, with 5 and 6 split as above
    """
    if remaining_days <= MAX_UNSPLIT_REMAINDER:
        return remaining_days
    if remaining_days in SPLIT_REMAINDERS:
        return SPLIT_REMAINDERS[remaining_days]
    if remaining_days % FULL_WEEK_DAYS == 0:
        return FULL_WEEK_DAYS

    remainder = remaining_days % FULL_WEEK_DAYS
    return SPLIT_REMAINDERS.get(remainder, remainder)


def _override_at(overrides: Sequence[int | None], index: int) -> int | None:
    if index >= len(overrides):
        return None
    value = overrides[index]
    # bool is an int subclass; a stray True must not read as a 1-day bag
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def partition(
    remaining_days: int,
    overrides: Sequence[int | None] = (),
    is_preservative_free: bool = False,
    enable_5: bool = False,
    enable_6: bool = False,
) -> list[int]:
    """Partition the remaining cycle days into bag durations.

    Args:
        remaining_days: Days left to cover. Callers only partition when
            this is positive; zero or less yields an empty list.
        overrides: Per-bag clinician overrides, indexed by bag position.
            Missing, out-of-range and disallowed values are ignored.
        is_preservative_free: Force 1-day bags.
        enable_5: Allow 5-day overrides.
        enable_6: Allow 6-day overrides.

    Returns:
        Bag durations in order. There are never more than MAX_BAGS of them;
        they sum to ``remaining_days`` unless that ceiling is reached first.
    """
    allowed = set(allowed_durations(is_preservative_free, enable_5, enable_6))
    durations: list[int] = []
    remaining = remaining_days

    for index in range(MAX_BAGS):
        if remaining <= 0:
            break

        override = _override_at(overrides, index)
        if override in allowed:
            duration = override
        elif is_preservative_free:
            duration = 1
        else:
            duration = greedy_duration(remaining)

        # An override longer than what is left just finishes the cycle
        duration = min(duration, remaining)
        durations.append(duration)
        remaining -= duration

    if remaining > 0:
        logger.warning(
            "Bag limit reached before end of cycle",
            remaining_days=remaining_days,
            uncovered_days=remaining,
            max_bags=MAX_BAGS,
        )

    return durations
