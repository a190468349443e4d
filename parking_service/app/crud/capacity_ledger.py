"""Capacity ledger for parking spots.

Every change to ``ParkingSpot.occupied_spots`` and ``ParkingSpot.total_spots``
goes through this module. Each operation is a single conditional UPDATE, so the
database serializes concurrent callers on the same row and the
``0 <= occupied_spots <= total_spots`` invariant holds without in-process locks.

None of these functions commit: they run inside the caller's transaction so the
counter moves together with the slip or booking row that owns the unit.
"""
import logging
from typing import Union
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from shared.core.errors import CapacityBelowOccupancy, CapacityExceeded, NotFound, ValidationError
from ..models.bookings import Booking
from ..models.parking_slips import ParkingSlip
from ..models.parking_spots import ParkingSpot

logger = logging.getLogger(__name__)

CapacityHolder = Union[Booking, ParkingSlip]


def _get_spot(db: Session, spot_id: UUID) -> ParkingSpot:
    spot = db.query(ParkingSpot).filter(ParkingSpot.id == spot_id).first()
    if not spot:
        raise NotFound("Parking spot not found")
    return spot


def _expire_counters(db: Session, spot_id: UUID) -> None:
    # bulk updates bypass the identity map, so drop any cached counter values
    spot = db.identity_map.get(db.identity_key(ParkingSpot, spot_id))
    if spot is not None:
        db.expire(spot, ["occupied_spots", "total_spots"])


def reserve(db: Session, spot_id: UUID) -> None:
    result = db.execute(
        update(ParkingSpot)
        .where(
            ParkingSpot.id == spot_id,
            ParkingSpot.total_spots > 0,
            ParkingSpot.occupied_spots < ParkingSpot.total_spots,
        )
        .values(occupied_spots=ParkingSpot.occupied_spots + 1)
        .execution_options(synchronize_session=False)
    )
    _expire_counters(db, spot_id)
    if result.rowcount == 1:
        return

    spot = _get_spot(db, spot_id)
    if spot.total_spots <= 0:
        raise CapacityExceeded("Parking spot capacity is not configured")
    logger.info("Spot %s is full (%s/%s)", spot_id,
                spot.occupied_spots, spot.total_spots)
    raise CapacityExceeded("Parking spot is full")


def release(db: Session, spot_id: UUID) -> None:
    result = db.execute(
        update(ParkingSpot)
        .where(ParkingSpot.id == spot_id, ParkingSpot.occupied_spots > 0)
        .values(occupied_spots=ParkingSpot.occupied_spots - 1)
        .execution_options(synchronize_session=False)
    )
    # clamp any drifted value back to zero in the same transaction
    db.execute(
        update(ParkingSpot)
        .where(ParkingSpot.id == spot_id, ParkingSpot.occupied_spots < 0)
        .values(occupied_spots=0)
        .execution_options(synchronize_session=False)
    )
    _expire_counters(db, spot_id)
    if result.rowcount == 0:
        # already at zero is fine, a missing spot is not
        _get_spot(db, spot_id)


def resize(db: Session, spot_id: UUID, new_total: int) -> None:
    if new_total is None or new_total < 0:
        raise ValidationError("Invalid total_spots")

    result = db.execute(
        update(ParkingSpot)
        .where(ParkingSpot.id == spot_id, ParkingSpot.occupied_spots <= new_total)
        .values(total_spots=new_total)
        .execution_options(synchronize_session=False)
    )
    _expire_counters(db, spot_id)
    if result.rowcount == 1:
        return

    _get_spot(db, spot_id)
    raise CapacityBelowOccupancy()


def _clear_flag(db: Session, holder: CapacityHolder) -> bool:
    # the conditional flip is the guard: of two racing releases only one matches
    model = type(holder)
    result = db.execute(
        update(model)
        .where(model.id == holder.id, model.holds_capacity == True)
        .values(holds_capacity=False)
        .execution_options(synchronize_session=False)
    )
    set_committed_value(holder, "holds_capacity", False)
    return result.rowcount == 1


def hold(db: Session, holder: CapacityHolder) -> None:
    reserve(db, holder.parking_spot_id)
    holder.holds_capacity = True


def release_hold(db: Session, holder: CapacityHolder) -> bool:
    """Give back the unit held by a slip or booking, at most once.

    The flag is cleared in the database before the counter moves, so a
    concurrent complete and delete of the same holder release a single unit.
    """
    if not _clear_flag(db, holder):
        logger.info("%s %s holds no capacity", type(holder).__name__, holder.id)
        return False
    release(db, holder.parking_spot_id)
    return True


def transfer_hold(db: Session, source: CapacityHolder, target: CapacityHolder) -> None:
    """Move a held unit between two holders on the same spot.

    The counter is unchanged when the source still holds its unit; otherwise
    the target reserves a fresh one.
    """
    if source.parking_spot_id != target.parking_spot_id:
        raise ValidationError("Cannot move capacity between parking spots")
    if _clear_flag(db, source):
        target.holds_capacity = True
    else:
        hold(db, target)


def reset(db: Session, owner_id: UUID) -> int:
    result = db.execute(
        update(ParkingSpot)
        .where(ParkingSpot.owner_id == owner_id)
        .values(occupied_spots=0)
        .execution_options(synchronize_session=False)
    )
    for obj in list(db.identity_map.values()):
        if isinstance(obj, ParkingSpot) and obj.owner_id == owner_id:
            db.expire(obj, ["occupied_spots"])
    return result.rowcount
