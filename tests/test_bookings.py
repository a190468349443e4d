import uuid
from datetime import datetime, timedelta, timezone

import pytest

from shared.core.errors import CapacityExceeded, NotFound, ValidationError
from parking_service.app.crud import booking_crud, parking_slip_crud
from parking_service.app.enum.parking_enum import BookingAction, BookingStatus
from parking_service.app.models import Booking, ParkingSlip
from parking_service.app.schemas.booking_schemas import BookingCreate, BookingRequest
from parking_service.app.schemas.parking_slip_schemas import ParkingSlipCreate

START = datetime(2026, 5, 10, 8, 0, 0)


def booking_request(spot, start=START, hours=2.5, **overrides):
    data = {
        "parking_spot_id": spot.id,
        "start_time": start,
        "end_time": start + timedelta(hours=hours),
        "customer_name": "Ravi",
        "customer_email": "ravi@parkmail.in",
        "customer_phone": "9876543210",
    }
    data.update(overrides)
    return BookingCreate(**data)


def test_price_is_hours_times_rate(db, make_spot, owner, occupancy):
    spot = make_spot(owner, price_per_hour=40)

    result = booking_crud.create_booking(db, booking_request(spot, hours=2.5))

    assert result["total_price"] == 100
    booking = result["booking"]
    assert booking.owner_id == owner.id
    assert booking.status == BookingStatus.ACTIVE.value
    assert booking.holds_capacity is True
    assert occupancy(spot.id) == 1


def test_end_must_follow_start(db, spot, occupancy):
    with pytest.raises(ValidationError):
        booking_crud.create_booking(db, booking_request(spot, hours=0))
    assert occupancy(spot.id) == 0


def test_full_spot_rolls_back_booking(db, make_spot, owner, occupancy):
    spot = make_spot(owner, total_spots=1, occupied_spots=1)

    with pytest.raises(CapacityExceeded):
        booking_crud.create_booking(db, booking_request(spot))

    assert db.query(Booking).count() == 0
    assert occupancy(spot.id) == 1


def test_unavailable_spot(db, make_spot, owner):
    spot = make_spot(owner, is_available=False)

    with pytest.raises(CapacityExceeded, match="not available"):
        booking_crud.create_booking(db, booking_request(spot))


def test_unknown_spot(db, spot):
    with pytest.raises(NotFound):
        booking_crud.create_booking(
            db, booking_request(spot, parking_spot_id=uuid.uuid4()))


def test_timezone_aware_times_are_stored_as_utc(db, spot):
    ist = timezone(timedelta(hours=5, minutes=30))
    start = datetime(2026, 5, 10, 13, 30, tzinfo=ist)

    booking = booking_crud.create_booking(
        db, booking_request(spot, start=start))["booking"]

    assert booking.start_time == START


@pytest.mark.parametrize("action,status", [
    (BookingAction.complete, BookingStatus.COMPLETED),
    (BookingAction.cancel, BookingStatus.CANCELLED),
])
def test_finishing_booking_releases_capacity(db, owner, spot, occupancy, action, status):
    booking = booking_crud.create_booking(db, booking_request(spot))["booking"]

    updated = booking_crud.update_booking_status(db, owner.id, booking.id, action)

    assert updated.status == status.value
    assert updated.holds_capacity is False
    assert occupancy(spot.id) == 0

    with pytest.raises(ValidationError):
        booking_crud.update_booking_status(db, owner.id, booking.id, action)
    assert occupancy(spot.id) == 0


def test_delete_booking_releases_and_detaches_slip(db, owner, make_spot, occupancy):
    spot = make_spot(owner, total_spots=3)
    kept = booking_crud.create_booking(db, booking_request(spot))["booking"]
    with_slip = booking_crud.create_booking(db, booking_request(spot))["booking"]
    slip = parking_slip_crud.create_parking_slip(
        db, owner.id, ParkingSlipCreate(booking_id=with_slip.id), now=START)
    assert occupancy(spot.id) == 2

    booking_crud.delete_booking(db, owner.id, kept.id)
    assert occupancy(spot.id) == 1

    # the slip holds the unit, not the booking
    booking_crud.delete_booking(db, owner.id, with_slip.id)
    assert occupancy(spot.id) == 1
    db.expire_all()
    assert db.get(ParkingSlip, slip.id).booking_id is None


def test_other_owner_cannot_touch_booking(db, make_user, make_spot):
    owner = make_user()
    stranger = make_user()
    spot = make_spot(owner)
    booking = booking_crud.create_booking(db, booking_request(spot))["booking"]

    with pytest.raises(NotFound):
        booking_crud.update_booking_status(
            db, stranger.id, booking.id, BookingAction.cancel)
    with pytest.raises(NotFound):
        booking_crud.delete_booking(db, stranger.id, booking.id)


def test_list_bookings_by_status(db, owner, make_spot):
    spot = make_spot(owner, total_spots=3)
    first = booking_crud.create_booking(db, booking_request(spot))["booking"]
    booking_crud.create_booking(db, booking_request(spot))
    booking_crud.update_booking_status(
        db, owner.id, first.id, BookingAction.complete)

    active = booking_crud.get_bookings(
        db, owner.id, BookingRequest(status="ACTIVE"))
    everything = booking_crud.get_bookings(db, owner.id, BookingRequest())

    assert active["total"] == 1
    assert everything["total"] == 2
