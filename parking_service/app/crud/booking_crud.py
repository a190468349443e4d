import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.database import atomic
from shared.core.errors import NotFound, CapacityExceeded, ValidationError
from . import capacity_ledger
from ..enum.parking_enum import BookingAction, BookingStatus
from ..models.bookings import Booking
from ..models.parking_slips import ParkingSlip
from ..models.parking_spots import ParkingSpot
from ..schemas.booking_schemas import BookingCreate, BookingOut, BookingRequest

logger = logging.getLogger(__name__)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def calculate_total_price(start: datetime, end: datetime, price_per_hour: float) -> float:
    return round(hours_between(start, end) * price_per_hour, 2)


# ----------------- Build Filters -----------------
def build_booking_filters(owner_id: UUID, params: BookingRequest):
    filters = [Booking.owner_id == owner_id]

    if params.status and params.status.lower() != "all":
        filters.append(func.upper(Booking.status) == params.status.upper())

    if params.parking_spot_id:
        filters.append(Booking.parking_spot_id == params.parking_spot_id)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(Booking.customer_name.ilike(search_term))

    return filters


# ----------------- Get All Bookings -----------------
def get_bookings(db: Session, owner_id: UUID, params: BookingRequest):
    base_query = db.query(Booking).filter(
        *build_booking_filters(owner_id, params))
    total = base_query.with_entities(func.count(Booking.id)).scalar()

    bookings = (
        base_query
        .order_by(Booking.created_at.desc())
        .offset(params.skip)
        .limit(params.limit or 10)
        .all()
    )

    return {
        "bookings": [BookingOut.model_validate(b) for b in bookings],
        "total": total
    }


def get_owned_booking(db: Session, owner_id: UUID, booking_id: UUID,
                      for_update: bool = False) -> Booking:
    query = db.query(Booking).filter(
        Booking.id == booking_id,
        Booking.owner_id == owner_id
    )
    if for_update:
        query = query.with_for_update().populate_existing()
    booking = query.first()

    if not booking:
        raise NotFound("Booking not found")
    return booking


# ----------------- Create -----------------
def create_booking(db: Session, data: BookingCreate) -> dict:
    if data.end_time <= data.start_time:
        raise ValidationError("end_time must be after start_time")

    with atomic(db):
        spot = db.query(ParkingSpot).filter(
            ParkingSpot.id == data.parking_spot_id).first()
        if not spot:
            raise NotFound("Parking spot not found")
        if not spot.is_available:
            raise CapacityExceeded("Parking spot is not available")

        total_price = calculate_total_price(
            data.start_time, data.end_time, spot.price_per_hour)

        booking = Booking(
            **data.model_dump(),
            owner_id=spot.owner_id,
            total_price=total_price,
            status=BookingStatus.ACTIVE.value
        )
        capacity_ledger.hold(db, booking)
        db.add(booking)

    db.refresh(booking)
    logger.info("Booking %s created on spot %s", booking.id,
                booking.parking_spot_id)
    return {
        "booking": BookingOut.model_validate(booking),
        "total_price": total_price
    }


# ----------------- Status transitions -----------------
def update_booking_status(db: Session, owner_id: UUID, booking_id: UUID, action: BookingAction) -> BookingOut:
    with atomic(db):
        booking = get_owned_booking(db, owner_id, booking_id)

        if booking.status != BookingStatus.ACTIVE.value:
            raise ValidationError(f"Booking is already {booking.status}")

        booking.status = (
            BookingStatus.COMPLETED.value
            if action == BookingAction.complete
            else BookingStatus.CANCELLED.value
        )
        capacity_ledger.release_hold(db, booking)

    db.refresh(booking)
    logger.info("Booking %s marked %s", booking.id, booking.status)
    return BookingOut.model_validate(booking)


# ----------------- Delete -----------------
def delete_booking(db: Session, owner_id: UUID, booking_id: UUID):
    with atomic(db):
        booking = get_owned_booking(db, owner_id, booking_id)
        capacity_ledger.release_hold(db, booking)

        # a slip printed for this booking outlives it as a manual slip
        db.query(ParkingSlip).filter(
            ParkingSlip.booking_id == booking.id
        ).update({ParkingSlip.booking_id: None})
        db.delete(booking)

    return {"success": True}
