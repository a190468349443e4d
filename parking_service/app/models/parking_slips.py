import uuid
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base
from shared.helpers.datetime_helper import utc_now


class ParkingSlip(Base):
    __tablename__ = "parking_slips"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    slip_number = Column(String(40), unique=True, nullable=False)  # PS-<ms>-<XXXXX>
    qr_payload = Column(Text, nullable=False)
    valid_until = Column(DateTime, nullable=False)
    car_number = Column(String(20))

    # null for manual slips
    booking_id = Column(UUID(as_uuid=True), ForeignKey(
        "bookings.id", ondelete="SET NULL"), unique=True, nullable=True)
    parking_spot_id = Column(UUID(as_uuid=True), ForeignKey(
        "parking_spots.id"), nullable=False, index=True)
    owner_id = Column(UUID(as_uuid=True), ForeignKey(
        "users.id"), nullable=False, index=True)

    status = Column(String(16), nullable=False, default="ACTIVE",
                    server_default=text("'ACTIVE'"))
    revenue = Column(Float)
    completed_at = Column(DateTime)
    holds_capacity = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    # relationships
    parking_spot = relationship("ParkingSpot", back_populates="slips")
    booking = relationship("Booking", back_populates="slip")

    @property
    def spot_title(self):
        return self.parking_spot.title if self.parking_spot else None

    @property
    def spot_address(self):
        return self.parking_spot.address if self.parking_spot else None
