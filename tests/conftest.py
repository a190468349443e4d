import os
import tempfile

# Point the app at a throwaway sqlite file before anything reads settings
_DB_DIR = tempfile.mkdtemp(prefix="parking-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'parking.db')}"
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient

from shared.core.auth import create_access_token
from shared.core.database import Base, ParkingSessionLocal, parking_engine
from shared.utils.enums import UserRole
from parking_service.app.main import app
from parking_service.app.models import Users, ParkingSpot


@pytest.fixture(autouse=True)
def reset_schema():
    Base.metadata.drop_all(bind=parking_engine)
    Base.metadata.create_all(bind=parking_engine)
    yield


@pytest.fixture
def db():
    session = ParkingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make(role=UserRole.OWNER.value, email=None, status="active"):
        user = Users(
            full_name="Test Owner",
            email=email or f"{role.lower()}-{os.urandom(4).hex()}@parkmail.in",
            role=role,
            status=status,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def owner(make_user):
    return make_user()


@pytest.fixture
def make_spot(db):
    def _make(owner, total_spots=2, occupied_spots=0, price_per_hour=50.0, is_available=True):
        # fixtures seed the counter directly; application code goes through the ledger
        spot = ParkingSpot(
            owner_id=owner.id,
            title="City Centre Garage",
            address="12 MG Road",
            latitude=12.97,
            longitude=77.59,
            price_per_hour=price_per_hour,
            total_spots=total_spots,
            occupied_spots=occupied_spots,
            is_available=is_available,
        )
        db.add(spot)
        db.commit()
        db.refresh(spot)
        return spot
    return _make


@pytest.fixture
def spot(owner, make_spot):
    return make_spot(owner)


@pytest.fixture
def occupancy(db):
    def _occupancy(spot_id):
        db.expire_all()
        return db.get(ParkingSpot, spot_id).occupied_spots
    return _occupancy


@pytest.fixture
def check_invariant(db):
    def _check():
        db.expire_all()
        for s in db.query(ParkingSpot).all():
            assert 0 <= s.occupied_spots <= s.total_spots
    return _check


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token(
            {"user_id": user.id, "role": user.role, "full_name": user.full_name})
        return {"Authorization": f"Bearer {token}"}
    return _headers
