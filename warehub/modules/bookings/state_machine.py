# warehub/modules/bookings/state_machine.py
"""
Booking lifecycle.

    PENDING  -> ACCEPTED | REJECTED | CANCELED
    ACCEPTED -> CANCELED

REJECTED and CANCELED are terminal.
"""
from typing import Dict, FrozenSet, Optional

from warehub.core.exceptions import InvalidInput, InvalidTransition
from warehub.shared.enums import BookingStatus

INITIAL_STATUS = BookingStatus.PENDING

ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({
        BookingStatus.ACCEPTED,
        BookingStatus.REJECTED,
        BookingStatus.CANCELED,
    }),
    BookingStatus.ACCEPTED: frozenset({BookingStatus.CANCELED}),
    BookingStatus.REJECTED: frozenset(),
    BookingStatus.CANCELED: frozenset(),
}


def parse_status(value: Optional[str]) -> BookingStatus:
    """Case-insensitive parse; unknown values are a bad request"""
    normalized = str(value or "").strip().upper()
    try:
        return BookingStatus(normalized)
    except ValueError:
        raise InvalidInput(f"Unknown booking status: {value}")


def allowed_transitions(current: str) -> FrozenSet[BookingStatus]:
    return ALLOWED_TRANSITIONS.get(BookingStatus(current), frozenset())


def can_transition(current: str, requested: str) -> bool:
    return BookingStatus(requested) in allowed_transitions(current)


def ensure_transition(current: str, requested: str) -> None:
    if not can_transition(current, requested):
        raise InvalidTransition(current, requested)


def is_terminal(status: str) -> bool:
    return not allowed_transitions(status)


def ui_status(status: str) -> str:
    """Clients render statuses in lowercase"""
    return status.lower()
