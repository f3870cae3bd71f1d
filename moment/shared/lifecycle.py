"""Status lifecycles for bookings and providers"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from ..config import ENFORCE_STATUS_TRANSITIONS
from ..errors import ValidationError


def utc_now_iso() -> str:
    """Server timestamp stored in createdAt / updatedAt"""
    return datetime.now(timezone.utc).isoformat()


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class ProviderStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


BOOKING_TRANSITIONS: dict[str, set[str]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.REJECTED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
    BookingStatus.REJECTED: set(),
}

PROVIDER_TRANSITIONS: dict[str, set[str]] = {
    ProviderStatus.PENDING: {ProviderStatus.APPROVED, ProviderStatus.REJECTED},
    ProviderStatus.APPROVED: {ProviderStatus.REJECTED},
    ProviderStatus.REJECTED: {ProviderStatus.APPROVED},
}


class StatusLifecycle:
    """Checks status writes against a transition table.

    With enforce=False every value is accepted, which matches how the status
    fields behaved before the tables existed.
    """

    def __init__(self, name: str, transitions: dict[str, set[str]], enforce: Optional[bool] = None):
        self.name = name
        self.transitions = transitions
        self.enforce = ENFORCE_STATUS_TRANSITIONS if enforce is None else enforce

    def can_transition(self, current: Optional[str], new: str) -> bool:
        if new not in self.transitions:
            return False
        # Documents written before enforcement may hold unknown values; allow moving off them
        if current is None or current == new or current not in self.transitions:
            return True
        return new in self.transitions[current]

    def check(self, current: Optional[str], new: str) -> str:
        if not self.enforce:
            return new
        if new not in self.transitions:
            allowed = ", ".join(s.value for s in self.transitions)
            raise ValidationError(f"Invalid {self.name} status '{new}'. Allowed: {allowed}")
        if not self.can_transition(current, new):
            raise ValidationError(f"Cannot change {self.name} status from '{current}' to '{new}'")
        return new


def booking_lifecycle(enforce: Optional[bool] = None) -> StatusLifecycle:
    return StatusLifecycle("booking", BOOKING_TRANSITIONS, enforce)


def provider_lifecycle(enforce: Optional[bool] = None) -> StatusLifecycle:
    return StatusLifecycle("provider", PROVIDER_TRANSITIONS, enforce)
