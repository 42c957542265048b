"""
Database Schemas for the Synergia event booking service

Each Pydantic model below corresponds to a MongoDB collection.
Collection name is the lowercase of the class name (e.g., Booking -> "booking").

Bookings reference their event by name only; nothing ties Booking.event to an
Event document.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class TicketType(str, Enum):
    REGULAR = "Regular"
    VIP = "VIP"


class BookingIn(BaseModel):
    """Request body for create and full update, checked after validation.py."""

    name: str = Field(..., description="Participant name")
    email: str = Field(..., description="Contact email")
    event: str = Field(..., description="Name of the booked event")
    ticketType: TicketType = Field(TicketType.REGULAR, description="Regular | VIP")

    def to_document(self) -> dict:
        return {
            "name": self.name.strip(),
            "email": self.email,
            "event": self.event.strip(),
            "ticketType": self.ticketType.value,
        }


class Booking(BookingIn):
    createdAt: datetime = Field(..., description="Set once at creation (UTC)")


class Event(BaseModel):
    name: str = Field(..., min_length=1, description="Event name")
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="Event date (YYYY-MM-DD)")
    seatsAvailable: bool = Field(True, description="Whether any seats are left")


SAMPLE_EVENTS = [
    Event(name="Synergia Hackathon", date="2025-10-30", seatsAvailable=True),
    Event(name="AI Workshop", date="2025-10-30", seatsAvailable=False),
    Event(name="Cultural Night", date="2025-11-02", seatsAvailable=True),
]
