"""Bag schedule clinical constants.

These values reproduce the pharmacy's fixed bag policy. They are not
derived from each other and must not be "corrected" individually.
"""

from typing import Final, NamedTuple

# One override slot and at most one bag per day of the longest cycle modeled.
MAX_BAGS: Final[int] = 28

# Durations that may always be chosen by override. 5 and 6 are added only
# when the matching policy flag is enabled.
BASE_BAG_DURATIONS: Final[frozenset[int]] = frozenset({1, 2, 3, 4, 7})
FIVE_DAY_BAG: Final[int] = 5
SIX_DAY_BAG: Final[int] = 6

# Preservative-free product cannot hang longer than a day.
PRESERVATIVE_FREE_DURATIONS: Final[frozenset[int]] = frozenset({1})

FULL_WEEK_DAYS: Final[int] = 7

# Greedy remainders that are split rather than hung as one bag:
# a 5-day span becomes 2 + 3, a 6-day span becomes 3 + 3.
SPLIT_REMAINDERS: Final[dict[int, int]] = {5: 2, 6: 3}

# Remainders up to this size are hung as a single bag.
MAX_UNSPLIT_REMAINDER: Final[int] = 4

TBD: Final[str] = "TBD"


class BagDetails(NamedTuple):
    volume_ml: int
    rate_ml_per_hr: float


# Volume and pump rate per bag duration (days).
BAG_DETAILS: Final[dict[int, BagDetails]] = {
    1: BagDetails(volume_ml=240, rate_ml_per_hr=10),
    2: BagDetails(volume_ml=240, rate_ml_per_hr=5),
    3: BagDetails(volume_ml=130, rate_ml_per_hr=1.8),
    4: BagDetails(volume_ml=173, rate_ml_per_hr=1.8),
    7: BagDetails(volume_ml=101, rate_ml_per_hr=0.6),
}

# Substring of the bag-change responsibility field that marks a
# patient/caregiver-managed infusion ("Pt/CG", "pt", ...).
CAREGIVER_MARKER: Final[str] = "pt"
