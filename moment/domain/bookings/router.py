"""Booking router - FastAPI endpoints for booking requests"""

import logging

from fastapi import APIRouter, Depends

from ...auth import Principal, get_current_principal
from ...policy import Action, authorize
from ...store import DocumentStore, get_store
from .schemas import BookingCreate, BookingStatusUpdate, BookingUpdate
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(store: DocumentStore = Depends(get_store)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(store)


# ============================================================================
# LISTINGS
# ============================================================================


@router.get("")
def get_bookings(
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
):
    """All bookings, newest first (admin only)"""
    authorize(principal, Action.BOOKING_LIST_ALL)
    return {"success": True, "bookings": service.get_all()}


@router.get("/user/{user_id}")
def get_user_bookings(
    user_id: str,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
):
    authorize(principal, Action.BOOKING_LIST_BY_USER, {"userId": user_id})
    return {"success": True, "bookings": service.get_by_user_id(user_id)}


@router.get("/provider/{provider_id}/dates")
def get_provider_booked_dates(
    provider_id: str,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
):
    """Dates already requested or confirmed for a provider (calendar display only)"""
    authorize(principal, Action.BOOKING_BOOKED_DATES, {"providerId": provider_id})
    return {"success": True, "dates": service.get_booked_dates(provider_id)}


@router.get("/provider/{provider_id}")
def get_provider_bookings(
    provider_id: str,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
):
    authorize(principal, Action.BOOKING_LIST_BY_PROVIDER, {"providerId": provider_id})
    return {"success": True, "bookings": service.get_by_provider_id(provider_id)}


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("/{booking_id}")
def get_booking(
    booking_id: str,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.get_or_404(booking_id)
    authorize(principal, Action.BOOKING_READ, booking)
    return {"success": True, "booking": booking}


@router.post("", status_code=201)
def create_booking(
    data: BookingCreate,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
):
    authorize(principal, Action.BOOKING_CREATE)
    booking = service.create_for_user(principal.subject_id, data.model_dump(exclude_unset=True))
    return {"success": True, "booking": booking}


@router.put("/{booking_id}")
def update_booking(
    booking_id: str,
    data: BookingUpdate,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.get_or_404(booking_id)
    authorize(principal, Action.BOOKING_UPDATE, booking)
    updated = service.update(booking_id, data.model_dump(exclude_unset=True))
    return {"success": True, "booking": updated}


@router.patch("/{booking_id}/status")
def update_booking_status(
    booking_id: str,
    data: BookingStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.get_or_404(booking_id)
    authorize(principal, Action.BOOKING_SET_STATUS, booking)
    return {"success": True, "booking": service.update_status(booking_id, data.status)}


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: str,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.get_or_404(booking_id)
    authorize(principal, Action.BOOKING_DELETE, booking)
    service.delete(booking_id)
    return {"success": True, "message": "Booking deleted successfully"}
