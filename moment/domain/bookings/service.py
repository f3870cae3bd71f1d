"""Booking service - booking requests and their status lifecycle.

Bookings are not checked for date conflicts: two bookings for the same
provider and date are both stored.
"""

import logging
from typing import Any, Optional

from ...collections import COLLECTION_BOOKINGS
from ...shared.lifecycle import BookingStatus, StatusLifecycle, booking_lifecycle
from ...store import DocumentStore
from ..base import ResourceService

logger = logging.getLogger(__name__)

# Bookings in these states no longer hold their dates
RELEASED_STATUSES = {BookingStatus.CANCELLED.value, BookingStatus.REJECTED.value}


def normalize_dates(data: dict[str, Any]) -> dict[str, Any]:
    """Keep `date` and `dates` consistent: date is dates[0]"""
    dates = data.get("dates")
    date = data.get("date")
    if dates:
        return {**data, "dates": list(dates), "date": date or dates[0]}
    if date:
        return {**data, "dates": [date], "date": date}
    return data


class BookingService(ResourceService):
    collection = COLLECTION_BOOKINGS
    name = "Booking"

    def __init__(self, store: DocumentStore, lifecycle: Optional[StatusLifecycle] = None):
        super().__init__(store)
        self.lifecycle = lifecycle or booking_lifecycle()

    def apply_defaults(self, data: dict[str, Any]) -> dict[str, Any]:
        return {
            **normalize_dates(data),
            "notes": data.get("notes") or "",
            "guestCount": data.get("guestCount") or 0,
            "status": BookingStatus.PENDING.value,
        }

    def create_for_user(self, user_id: str, data: dict[str, Any]) -> dict:
        """Create a booking owned by user_id, whatever userId the caller sent"""
        booking = self.create({**data, "userId": user_id})
        logger.info(f"📅 Booking {booking['id']} requested by {user_id} for provider {booking.get('providerId')}")
        return booking

    def get_all(self) -> list[dict]:
        return self.list(order_by="createdAt", descending=True)

    def get_by_user_id(self, user_id: str) -> list[dict]:
        return self.list({"userId": user_id}, order_by="createdAt", descending=True)

    def get_by_provider_id(self, provider_id: str) -> list[dict]:
        return self.list({"providerId": provider_id}, order_by="createdAt", descending=True)

    def get_booked_dates(self, provider_id: str) -> list[str]:
        """Dates held by the provider's pending, confirmed or completed bookings"""
        booked = set()
        for booking in self.get_by_provider_id(provider_id):
            if booking.get("status") in RELEASED_STATUSES:
                continue
            booked.update(normalize_dates(booking).get("dates") or [])
        return sorted(booked)

    def update(self, doc_id: str, data: dict[str, Any]) -> dict:
        if "status" in data:
            current = self.get_or_404(doc_id)
            self.lifecycle.check(current.get("status"), data["status"])
        if "dates" in data or "date" in data:
            data = normalize_dates(data)
        return super().update(doc_id, data)

    def update_status(self, doc_id: str, status: str) -> dict:
        booking = self.update(doc_id, {"status": status})
        logger.info(f"📋 Booking {doc_id} status set to '{status}'")
        return booking
