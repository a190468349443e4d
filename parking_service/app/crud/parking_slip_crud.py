import json
import logging
import math
import secrets
import string
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import atomic
from shared.core.errors import AlreadyExists, NotFound, ValidationError
from shared.helpers.datetime_helper import utc_now
from . import capacity_ledger
from .booking_crud import get_owned_booking
from .parking_spot_crud import get_owned_spot
from ..enum.parking_enum import BookingStatus, SlipStatus
from ..models.bookings import Booking
from ..models.parking_slips import ParkingSlip
from ..models.parking_spots import ParkingSpot
from ..schemas.parking_slip_schemas import ParkingSlipCreate, ParkingSlipOut, ParkingSlipRequest

logger = logging.getLogger(__name__)

SLIP_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits
SLIP_NUMBER_ATTEMPTS = 5


# ---------------- SLIP NUMBER & QR ----------------
def generate_slip_number(now: Optional[datetime] = None) -> str:
    now = now or utc_now()
    millis = int((now - datetime(1970, 1, 1)).total_seconds() * 1000)
    suffix = "".join(secrets.choice(SLIP_SUFFIX_ALPHABET) for _ in range(5))
    return f"PS-{millis}-{suffix}"


def next_slip_number(db: Session, now: Optional[datetime] = None) -> str:
    for _ in range(SLIP_NUMBER_ATTEMPTS):
        slip_number = generate_slip_number(now)
        taken = db.query(ParkingSlip.id).filter(
            ParkingSlip.slip_number == slip_number).first()
        if not taken:
            return slip_number
    raise AlreadyExists("Could not allocate a unique slip number")


def build_qr_payload(slip: ParkingSlip, spot: ParkingSpot) -> str:
    """JSON handed to the client, which renders it as a QR code."""
    payload = {
        "slipNumber": slip.slip_number,
        "spotTitle": spot.title,
        "validUntil": slip.valid_until.isoformat(),
        "carNumber": slip.car_number,
    }
    if slip.booking_id:
        payload["bookingId"] = str(slip.booking_id)
    else:
        payload["parkingSpotId"] = str(spot.id)
    return json.dumps(payload)


def to_slip_out(slip: ParkingSlip) -> ParkingSlipOut:
    return ParkingSlipOut.model_validate(slip)


# ---------------- LIST ----------------
def get_parking_slips(db: Session, owner_id: UUID, params: ParkingSlipRequest):
    query = db.query(ParkingSlip).filter(ParkingSlip.owner_id == owner_id)

    if params.status:
        query = query.filter(
            func.upper(ParkingSlip.status) == params.status.upper())

    if params.search:
        query = query.filter(or_(
            ParkingSlip.slip_number.ilike(f"%{params.search}%"),
            ParkingSlip.car_number.ilike(f"%{params.search}%")
        ))

    total = query.with_entities(func.count(ParkingSlip.id)).scalar()

    slips = (
        query.order_by(ParkingSlip.created_at.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"slips": [to_slip_out(s) for s in slips], "total": total}


def booking_has_slip(db: Session, booking_id: UUID) -> bool:
    return db.query(ParkingSlip.id).filter(
        ParkingSlip.booking_id == booking_id).first() is not None


def get_owned_slip(db: Session, owner_id: UUID, slip_id: UUID) -> ParkingSlip:
    slip = db.query(ParkingSlip).filter(
        ParkingSlip.id == slip_id,
        ParkingSlip.owner_id == owner_id
    ).first()

    if not slip:
        raise NotFound("Slip not found")
    return slip


# ---------------- CREATE ----------------
def create_parking_slip(db: Session, owner_id: UUID, data: ParkingSlipCreate,
                        now: Optional[datetime] = None) -> ParkingSlipOut:
    now = now or utc_now()

    with atomic(db):
        if data.booking_id:
            slip = _slip_from_booking(db, owner_id, data, now)
        else:
            slip = _manual_slip(db, owner_id, data, now)

        slip.slip_number = next_slip_number(db, now)
        slip.qr_payload = build_qr_payload(slip, slip.parking_spot)
        db.add(slip)

        # a concurrent request may have issued the slip after our checks
        try:
            db.flush()
        except IntegrityError as exc:
            raise AlreadyExists("Slip already exists for this booking"
                                if data.booking_id else "Slip number already taken") from exc

    db.refresh(slip)
    logger.info("Slip %s issued for spot %s", slip.slip_number,
                slip.parking_spot_id)
    return to_slip_out(slip)


def _slip_from_booking(db: Session, owner_id: UUID, data: ParkingSlipCreate, now: datetime) -> ParkingSlip:
    # row lock serializes slip creation for the same booking
    booking = get_owned_booking(
        db, owner_id, data.booking_id, for_update=True)

    if booking_has_slip(db, booking.id):
        raise AlreadyExists("Slip already exists for this booking")

    if booking.status != BookingStatus.ACTIVE.value:
        raise ValidationError(f"Booking is {booking.status}")

    slip = ParkingSlip(
        booking_id=booking.id,
        parking_spot_id=booking.parking_spot_id,
        owner_id=owner_id,
        valid_until=booking.end_time,
        car_number=data.car_number or booking.car_number,
        status=SlipStatus.ACTIVE.value,
        created_at=now,
    )
    slip.parking_spot = booking.parking_spot

    # the booking already occupies a stall; the slip takes it over
    capacity_ledger.transfer_hold(db, booking, slip)
    return slip


def _manual_slip(db: Session, owner_id: UUID, data: ParkingSlipCreate, now: datetime) -> ParkingSlip:
    spot = get_owned_spot(db, owner_id, data.parking_spot_id)
    valid_hours = data.valid_hours or settings.DEFAULT_SLIP_VALID_HOURS

    slip = ParkingSlip(
        parking_spot_id=spot.id,
        owner_id=owner_id,
        valid_until=now + timedelta(hours=valid_hours),
        car_number=data.car_number,
        status=SlipStatus.ACTIVE.value,
        created_at=now,
    )
    slip.parking_spot = spot
    capacity_ledger.hold(db, slip)
    return slip


# ---------------- COMPLETE ----------------
def calculate_revenue(slip: ParkingSlip, revenue_override: Optional[float], now: datetime) -> float:
    # zero or negative overrides count as "not given"
    if revenue_override is not None and revenue_override > 0:
        return revenue_override

    if slip.booking is not None:
        return slip.booking.total_price

    hours = (now - slip.created_at).total_seconds() / 3600
    return math.ceil(hours) * slip.parking_spot.price_per_hour


def complete_parking_slip(db: Session, owner_id: UUID, slip_id: UUID,
                          revenue: Optional[float] = None,
                          now: Optional[datetime] = None) -> ParkingSlipOut:
    now = now or utc_now()

    with atomic(db):
        slip = get_owned_slip(db, owner_id, slip_id)

        if slip.status != SlipStatus.ACTIVE.value:
            raise ValidationError(f"Slip is already {slip.status}")

        slip.revenue = calculate_revenue(slip, revenue, now)
        slip.status = SlipStatus.COMPLETED.value
        slip.completed_at = now
        capacity_ledger.release_hold(db, slip)

        if slip.booking is not None and slip.booking.status == BookingStatus.ACTIVE.value:
            slip.booking.status = BookingStatus.COMPLETED.value
            capacity_ledger.release_hold(db, slip.booking)

    db.refresh(slip)
    logger.info("Slip %s completed, revenue %s", slip.slip_number, slip.revenue)
    return to_slip_out(slip)


# ---------------- DELETE ----------------
def delete_parking_slip(db: Session, owner_id: UUID, slip_id: UUID):
    with atomic(db):
        slip = get_owned_slip(db, owner_id, slip_id)
        released = capacity_ledger.release_hold(db, slip)
        db.delete(slip)

    logger.info("Slip %s deleted (capacity released: %s)", slip_id, released)
    return {"success": True}


# ---------------- EXPIRE ----------------
def expire_parking_slips(db: Session, owner_id: UUID, now: Optional[datetime] = None) -> dict:
    now = now or utc_now()

    with atomic(db):
        overdue = db.query(ParkingSlip).filter(
            ParkingSlip.owner_id == owner_id,
            ParkingSlip.status == SlipStatus.ACTIVE.value,
            ParkingSlip.valid_until < now
        ).all()

        for slip in overdue:
            slip.status = SlipStatus.EXPIRED.value
            capacity_ledger.release_hold(db, slip)

    if overdue:
        logger.info("Expired %s slips for owner %s", len(overdue), owner_id)
    return {"expired": len(overdue)}


# ---------------- CLEAR ----------------
def clear_owner_data(db: Session, owner_id: UUID):
    with atomic(db):
        db.query(ParkingSlip).filter(
            ParkingSlip.owner_id == owner_id).delete()
        db.query(Booking).filter(Booking.owner_id == owner_id).delete()
        capacity_ledger.reset(db, owner_id)

    logger.warning("Cleared all slips and bookings for owner %s", owner_id)
    return {"success": True, "message": "All data cleared successfully"}
