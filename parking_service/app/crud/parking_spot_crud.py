import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.database import atomic
from shared.core.errors import NotFound
from . import capacity_ledger
from ..enum.parking_enum import BookingStatus
from ..models.bookings import Booking
from ..models.parking_slips import ParkingSlip
from ..models.parking_spots import ParkingSpot
from ..schemas.parking_spot_schemas import (
    NearbyParkingSpotOut,
    ParkingSpotCreate,
    ParkingSpotDetailOut,
    ParkingSpotOut,
    ParkingSpotRequest,
    ParkingSpotUpdate,
    PublicParkingSpotOut,
)

logger = logging.getLogger(__name__)


def get_owned_spot(db: Session, owner_id: UUID, spot_id: UUID) -> ParkingSpot:
    spot = db.query(ParkingSpot).filter(
        ParkingSpot.id == spot_id,
        ParkingSpot.owner_id == owner_id
    ).first()

    if not spot:
        raise NotFound("Parking spot not found")
    return spot


def _counts_query(db: Session):
    active_bookings = (
        db.query(func.count(Booking.id))
        .filter(
            Booking.parking_spot_id == ParkingSpot.id,
            Booking.status == BookingStatus.ACTIVE.value
        )
        .correlate(ParkingSpot)
        .scalar_subquery()
    )
    slips = (
        db.query(func.count(ParkingSlip.id))
        .filter(ParkingSlip.parking_spot_id == ParkingSpot.id)
        .correlate(ParkingSpot)
        .scalar_subquery()
    )
    return db.query(
        ParkingSpot,
        active_bookings.label("active_bookings"),
        slips.label("slips")
    )


def _detail(spot: ParkingSpot, active_bookings: int, slips: int) -> ParkingSpotDetailOut:
    return ParkingSpotDetailOut.model_validate(
        {
            **ParkingSpotOut.model_validate(spot).model_dump(),
            "active_bookings": active_bookings or 0,
            "slips": slips or 0
        }
    )


# ---------------- LIST ----------------
def get_parking_spots(db: Session, owner_id: UUID, params: ParkingSpotRequest):
    query = _counts_query(db).filter(ParkingSpot.owner_id == owner_id)

    if params.search:
        query = query.filter(
            ParkingSpot.title.ilike(f"%{params.search}%")
        )

    if params.is_available is not None:
        query = query.filter(ParkingSpot.is_available == params.is_available)

    total = query.count()

    rows = (
        query.order_by(ParkingSpot.created_at.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )

    return {
        "parking_spots": [_detail(*row) for row in rows],
        "total": total
    }


def get_parking_spot_details(db: Session, owner_id: UUID, spot_id: UUID) -> ParkingSpotDetailOut:
    row = _counts_query(db).filter(
        ParkingSpot.id == spot_id,
        ParkingSpot.owner_id == owner_id
    ).first()

    if not row:
        raise NotFound("Parking spot not found")
    return _detail(*row)


def _available_spots(db: Session):
    return (
        db.query(ParkingSpot)
        .filter(ParkingSpot.is_available == True)
        .order_by(ParkingSpot.created_at.desc())
        .all()
    )


def get_available_parking_spots(db: Session):
    return {"spots": [PublicParkingSpotOut.model_validate(s) for s in _available_spots(db)]}


def get_nearby_parking_spots(db: Session):
    spots = _available_spots(db)

    results = [
        NearbyParkingSpotOut.model_validate(
            {
                **ParkingSpotOut.model_validate(spot).model_dump(),
                "available_spots": spot.total_spots - spot.occupied_spots
            }
        )
        for spot in spots
    ]
    return {"spots": results, "total_found": len(results)}


# ---------------- CREATE ----------------
def create_parking_spot(db: Session, owner_id: UUID, data: ParkingSpotCreate) -> ParkingSpotOut:
    with atomic(db):
        spot = ParkingSpot(
            **data.model_dump(),
            owner_id=owner_id,
            occupied_spots=0
        )
        db.add(spot)

    db.refresh(spot)
    logger.info("Created parking spot %s with %s spots",
                spot.id, spot.total_spots)
    return ParkingSpotOut.model_validate(spot)


# ---------------- UPDATE ----------------
def update_parking_spot(db: Session, owner_id: UUID, spot_id: UUID, data: ParkingSpotUpdate):
    with atomic(db):
        spot = get_owned_spot(db, owner_id, spot_id)

        if data.is_available is not None:
            spot.is_available = data.is_available

        if data.total_spots is not None:
            capacity_ledger.resize(db, spot.id, data.total_spots)

    return get_parking_spot_details(db, owner_id, spot_id)


# ---------------- DELETE ----------------
def delete_parking_spot(db: Session, owner_id: UUID, spot_id: UUID):
    with atomic(db):
        spot = get_owned_spot(db, owner_id, spot_id)

        db.query(ParkingSlip).filter(
            ParkingSlip.parking_spot_id == spot.id
        ).delete()
        db.query(Booking).filter(
            Booking.parking_spot_id == spot.id
        ).delete()
        db.query(ParkingSpot).filter(
            ParkingSpot.id == spot.id
        ).delete()

    logger.info("Deleted parking spot %s", spot_id)
    return {"success": True}
