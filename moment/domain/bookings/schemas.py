"""Booking domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BookingCreate(BaseModel):
    """Schema for a booking request.

    userId is accepted for compatibility but always replaced by the caller's uid.
    """

    model_config = ConfigDict(extra="allow")

    providerId: str
    serviceId: Optional[str] = None
    userId: Optional[str] = None
    eventType: Optional[str] = None
    date: Optional[str] = None
    dates: Optional[list[str]] = None
    time: Optional[str] = None
    guestCount: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None
    totalPrice: Optional[float] = Field(None, ge=0)


class BookingUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    eventType: Optional[str] = None
    date: Optional[str] = None
    dates: Optional[list[str]] = None
    time: Optional[str] = None
    guestCount: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None
    status: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status: str
