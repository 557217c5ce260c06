"""Bag schedule enums."""

from enum import StrEnum, auto


class AlertState(StrEnum):
    """Per-bag alert state.

    Precedence when several apply to one bag: aspiration, then RN visit,
    then routine.
    """

    none = auto()
    today_routine = auto()
    tomorrow_routine = auto()
    aspiration_tomorrow = auto()
    aspiration_today = auto()
    rn_visit_today = auto()
    rn_visit_tomorrow = auto()


class DisconnectAlert(StrEnum):
    """Alert for the final disconnect at the end of the cycle."""

    none = auto()
    disconnect_today = auto()
    disconnect_tomorrow = auto()


class CalendarEventKind(StrEnum):
    bag = auto()
    final_disconnect = auto()
