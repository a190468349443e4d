import uuid
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base
from shared.helpers.datetime_helper import utc_now


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    parking_spot_id = Column(UUID(as_uuid=True), ForeignKey(
        "parking_spots.id"), nullable=False, index=True)
    # copied from the spot at booking time
    owner_id = Column(UUID(as_uuid=True), ForeignKey(
        "users.id"), nullable=False, index=True)

    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    total_price = Column(Float, nullable=False)

    customer_name = Column(String(200), nullable=False)
    customer_email = Column(String(200), nullable=False)
    customer_phone = Column(String(20))
    car_number = Column(String(20))

    status = Column(String(16), nullable=False, default="ACTIVE",
                    server_default=text("'ACTIVE'"))
    holds_capacity = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    # relationships
    parking_spot = relationship("ParkingSpot", back_populates="bookings")
    slip = relationship("ParkingSlip", back_populates="booking", uselist=False)
