import uuid
from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base
from shared.helpers.datetime_helper import utc_now


class ParkingSpot(Base):
    __tablename__ = "parking_spots"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(UUID(as_uuid=True), ForeignKey(
        "users.id"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text)
    address = Column(String(500), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    price_per_hour = Column(Float, nullable=False)

    # occupied_spots is written only by crud.capacity_ledger
    total_spots = Column(Integer, nullable=False, default=0)
    occupied_spots = Column(Integer, nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        CheckConstraint("total_spots >= 0", name="ck_spot_total_non_negative"),
        CheckConstraint("occupied_spots >= 0",
                        name="ck_spot_occupied_non_negative"),
        CheckConstraint("occupied_spots <= total_spots",
                        name="ck_spot_occupied_within_total"),
    )

    # relationships
    owner = relationship("Users", back_populates="parking_spots")
    bookings = relationship("Booking", back_populates="parking_spot")
    slips = relationship("ParkingSlip", back_populates="parking_spot")
