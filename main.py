import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, Query, status
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from database import (
    DocumentStore,
    close_client,
    get_booking_store,
    get_db,
    get_event_store,
    serialize,
    utc_now,
)
from exceptions import DomainError, NotFoundError, register_exception_handlers
from logger_config import setup_logging
from schemas import SAMPLE_EVENTS, Booking, BookingIn, Event
from settings import settings
from validation import is_valid_date, validate_booking_input

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    close_client()


app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


# Helpers
def parse_booking(payload: Any) -> BookingIn:
    reason = validate_booking_input(payload)
    if reason:
        raise DomainError(reason)
    try:
        return BookingIn.model_validate(payload)
    except ValidationError:
        # name, email and event already passed, so only ticketType is left
        raise DomainError("Invalid ticket type") from None


def found_or_404(docs: List[dict], message: str) -> List[dict]:
    if not docs:
        raise NotFoundError(message)
    return [serialize(d) for d in docs]


@app.get("/")
def read_root():
    return {"message": "Synergia Event Booking Backend Running"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if os.getenv("DATABASE_URL") else "⚠️  Using default",
        "database_name": settings.DATABASE_NAME,
        "connection_status": "Not Connected",
        "collections": [],
    }

    try:
        db = get_db()
        collections = db.list_collection_names()
        response["collections"] = collections[:10]
        response["connection_status"] = "Connected"
        response["database"] = "✅ Connected & Working"
    except PyMongoError as e:
        logger.warning(f"Database check failed: {e}")
        response["database"] = f"⚠️  Not reachable: {str(e)[:80]}"

    return response


# Bookings
@app.get("/api/bookings")
def list_bookings(store: DocumentStore = Depends(get_booking_store)):
    return [serialize(d) for d in store.find_all()]


@app.post("/api/bookings", status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: Any = Body(None),
    store: DocumentStore = Depends(get_booking_store),
):
    booking = parse_booking(payload)
    doc = store.insert({**booking.to_document(), "createdAt": utc_now()})
    logger.info(f"Booking {doc['_id']} created for event '{doc['event']}'")
    return serialize(doc)


@app.get("/api/bookings/search")
def search_bookings(
    email: str = Query(..., description="Exact email to match"),
    store: DocumentStore = Depends(get_booking_store),
):
    return found_or_404(store.find_all({"email": email}), "No bookings found for this email")


@app.get("/api/bookings/filter")
def filter_bookings(
    event: str = Query(..., description="Exact event name to match"),
    store: DocumentStore = Depends(get_booking_store),
):
    return found_or_404(store.find_all({"event": event}), "No bookings found for this event")


@app.get("/api/bookings/{booking_id}")
def get_booking(booking_id: str, store: DocumentStore = Depends(get_booking_store)):
    doc = store.find_by_id(booking_id)
    if not doc:
        raise NotFoundError("Booking not found")
    return serialize(doc)


@app.put("/api/bookings/{booking_id}")
def update_booking(
    booking_id: str,
    payload: Any = Body(None),
    store: DocumentStore = Depends(get_booking_store),
):
    booking = parse_booking(payload)
    doc = store.update_by_id(booking_id, booking.to_document())
    if not doc:
        raise NotFoundError("Booking not found")
    logger.info(f"Booking {booking_id} updated")
    return serialize(doc)


@app.delete("/api/bookings/{booking_id}")
def delete_booking(booking_id: str, store: DocumentStore = Depends(get_booking_store)):
    doc = store.delete_by_id(booking_id)
    if not doc:
        raise NotFoundError("Booking not found")
    logger.info(f"Booking {booking_id} canceled")
    return serialize(doc)


# Events
@app.get("/events")
def list_events(
    date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    seatsAvailable: Optional[str] = Query(None, description="true to keep events with free seats"),
    sort: Optional[str] = Query(None, description="'name' to order alphabetically"),
    store: DocumentStore = Depends(get_event_store),
):
    query: Dict[str, Any] = {}
    if date is not None:
        if not is_valid_date(date):
            raise DomainError("Invalid date format. Use YYYY-MM-DD")
        query["date"] = date
    if seatsAvailable is not None:
        query["seatsAvailable"] = seatsAvailable.strip().lower() == "true"

    order = [("name", 1)] if sort == "name" else None
    # an empty list is a valid answer here, unlike booking search/filter
    return [serialize(d) for d in store.find_all(query, sort=order)]


@app.post("/events/sample", status_code=status.HTTP_201_CREATED)
def insert_sample_events(store: DocumentStore = Depends(get_event_store)):
    inserted = store.insert_many([e.model_dump() for e in SAMPLE_EVENTS])
    logger.info(f"Inserted {inserted} sample events")
    return {"message": "Sample events inserted", "inserted": inserted}


# Expose schemas for admin viewer
@app.get("/schema")
def get_schema_definitions():
    return {
        "booking": Booking.model_json_schema(),
        "event": Event.model_json_schema(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
