import threading
import uuid

import pytest

from shared.core.database import ParkingSessionLocal
from shared.core.errors import CapacityBelowOccupancy, CapacityExceeded, NotFound, ValidationError
from parking_service.app.crud import capacity_ledger, parking_slip_crud
from parking_service.app.schemas.parking_slip_schemas import ParkingSlipCreate


def test_reserve_increments_until_full(db, make_spot, owner, occupancy, check_invariant):
    spot = make_spot(owner, total_spots=2)

    capacity_ledger.reserve(db, spot.id)
    capacity_ledger.reserve(db, spot.id)
    db.commit()
    assert occupancy(spot.id) == 2

    with pytest.raises(CapacityExceeded, match="full"):
        capacity_ledger.reserve(db, spot.id)
    db.rollback()

    assert occupancy(spot.id) == 2
    check_invariant()


def test_reserve_refuses_spot_without_capacity(db, make_spot, owner, occupancy):
    spot = make_spot(owner, total_spots=0)

    with pytest.raises(CapacityExceeded, match="not configured"):
        capacity_ledger.reserve(db, spot.id)
    db.rollback()

    assert occupancy(spot.id) == 0


def test_reserve_unknown_spot(db):
    with pytest.raises(NotFound):
        capacity_ledger.reserve(db, uuid.uuid4())


def test_in_session_spot_sees_new_count(db, spot):
    capacity_ledger.reserve(db, spot.id)
    assert spot.occupied_spots == 1


def test_release_clamps_at_zero(db, spot, occupancy):
    capacity_ledger.release(db, spot.id)
    capacity_ledger.release(db, spot.id)
    db.commit()

    assert occupancy(spot.id) == 0


def test_release_decrements(db, make_spot, owner, occupancy):
    spot = make_spot(owner, total_spots=3, occupied_spots=3)

    capacity_ledger.release(db, spot.id)
    db.commit()

    assert occupancy(spot.id) == 2


def test_release_unknown_spot(db):
    with pytest.raises(NotFound):
        capacity_ledger.release(db, uuid.uuid4())


def test_resize_below_occupancy_is_rejected(db, make_spot, owner):
    spot = make_spot(owner, total_spots=5, occupied_spots=3)

    with pytest.raises(CapacityBelowOccupancy):
        capacity_ledger.resize(db, spot.id, 2)
    db.rollback()

    db.expire_all()
    assert spot.total_spots == 5


@pytest.mark.parametrize("new_total", [3, 4, 10])
def test_resize_at_or_above_occupancy(db, make_spot, owner, new_total):
    spot = make_spot(owner, total_spots=5, occupied_spots=3)

    capacity_ledger.resize(db, spot.id, new_total)
    db.commit()

    db.expire_all()
    assert spot.total_spots == new_total
    assert spot.occupied_spots == 3


def test_resize_rejects_negative(db, spot):
    with pytest.raises(ValidationError):
        capacity_ledger.resize(db, spot.id, -1)


def test_resize_unknown_spot(db):
    with pytest.raises(NotFound):
        capacity_ledger.resize(db, uuid.uuid4(), 4)


def test_concurrent_reserve_on_last_unit(make_spot, owner, occupancy):
    spot = make_spot(owner, total_spots=1)
    barrier = threading.Barrier(2)
    outcomes = []
    lock = threading.Lock()

    def worker():
        session = ParkingSessionLocal()
        try:
            barrier.wait()
            capacity_ledger.reserve(session, spot.id)
            session.commit()
            outcome = "reserved"
        except CapacityExceeded:
            session.rollback()
            outcome = "full"
        finally:
            session.close()
        with lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["full", "reserved"]
    assert occupancy(spot.id) == 1


def test_reset_zeroes_only_owner_spots(db, make_spot, make_user, occupancy):
    owner = make_user()
    other = make_user()
    mine = make_spot(owner, total_spots=4, occupied_spots=3)
    theirs = make_spot(other, total_spots=4, occupied_spots=2)

    capacity_ledger.reset(db, owner.id)
    db.commit()

    assert occupancy(mine.id) == 0
    assert occupancy(theirs.id) == 2


def test_holder_released_from_two_sessions_frees_one_unit(db, make_spot, owner, occupancy):
    spot = make_spot(owner, total_spots=2)
    first = parking_slip_crud.create_parking_slip(
        db, owner.id, ParkingSlipCreate(parking_spot_id=spot.id))
    parking_slip_crud.create_parking_slip(
        db, owner.id, ParkingSlipCreate(parking_spot_id=spot.id))
    assert occupancy(spot.id) == 2

    other = ParkingSessionLocal()
    try:
        stale = parking_slip_crud.get_owned_slip(other, owner.id, first.id)
        assert stale.holds_capacity is True

        slip = parking_slip_crud.get_owned_slip(db, owner.id, first.id)
        assert capacity_ledger.release_hold(db, slip) is True
        db.commit()

        assert capacity_ledger.release_hold(other, stale) is False
        other.commit()
        assert stale.holds_capacity is False
    finally:
        other.close()

    assert occupancy(spot.id) == 1
