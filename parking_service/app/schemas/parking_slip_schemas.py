from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from shared.core.schemas import CommonQueryParams
from ..enum.parking_enum import SlipAction


# ---------------- CREATE ----------------
class ParkingSlipCreate(BaseModel):
    """Either ``booking_id`` (slip for an online booking) or
    ``parking_spot_id`` (manual slip) must be given, not both."""

    booking_id: Optional[UUID] = None
    parking_spot_id: Optional[UUID] = None
    valid_hours: Optional[float] = Field(default=None, gt=0)
    car_number: Optional[str] = Field(default=None, max_length=20)

    @model_validator(mode="after")
    def check_source(self):
        if bool(self.booking_id) == bool(self.parking_spot_id):
            raise ValueError(
                "Provide exactly one of booking_id or parking_spot_id")
        return self


# ---------------- UPDATE ----------------
class ParkingSlipUpdate(BaseModel):
    action: SlipAction
    revenue: Optional[float] = None


# ---------------- REQUEST (FILTERS) ----------------
class ParkingSlipRequest(CommonQueryParams):
    status: Optional[str] = None


# ---------------- OUTPUT ----------------
class ParkingSlipOut(BaseModel):
    id: UUID
    slip_number: str
    qr_payload: str
    valid_until: datetime
    car_number: Optional[str] = None
    booking_id: Optional[UUID] = None
    parking_spot_id: UUID
    status: str
    revenue: Optional[float] = None
    completed_at: Optional[datetime] = None
    holds_capacity: bool
    spot_title: Optional[str] = None
    spot_address: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ParkingSlipResponse(BaseModel):
    slips: List[ParkingSlipOut]
    total: int


class ExpireSlipsOut(BaseModel):
    expired: int
