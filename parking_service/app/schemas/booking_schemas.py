from datetime import datetime
from uuid import UUID
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from shared.core.schemas import CommonQueryParams
from shared.helpers.datetime_helper import to_naive_utc
from ..enum.parking_enum import BookingAction


# ----------------- Base -----------------
class BookingBase(BaseModel):
    parking_spot_id: UUID
    start_time: datetime
    end_time: datetime
    customer_name: str = Field(min_length=1, max_length=200)
    customer_email: EmailStr
    customer_phone: Optional[str] = None
    car_number: Optional[str] = None

    model_config = {"from_attributes": True}


# ----------------- Create -----------------
class BookingCreate(BookingBase):

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


# ----------------- Update -----------------
class BookingUpdate(BaseModel):
    action: BookingAction


# ----------------- Out -----------------
class BookingOut(BookingBase):
    id: UUID
    owner_id: UUID
    total_price: float
    status: str
    holds_capacity: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BookingCreateResponse(BaseModel):
    booking: BookingOut
    total_price: float


# ----------------- Request -----------------
class BookingRequest(CommonQueryParams):
    status: Optional[str] = None
    parking_spot_id: Optional[UUID] = None


# ----------------- List Response -----------------
class BookingListResponse(BaseModel):
    bookings: List[BookingOut]
    total: int

    model_config = {"from_attributes": True}
