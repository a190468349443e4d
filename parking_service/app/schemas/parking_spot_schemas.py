from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from shared.core.schemas import CommonQueryParams


class ParkingSpotBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    address: str = Field(min_length=1, max_length=500)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    price_per_hour: float = Field(gt=0)

    model_config = {
        "from_attributes": True
    }


class ParkingSpotCreate(ParkingSpotBase):
    total_spots: int = Field(default=0, ge=0)


class ParkingSpotUpdate(BaseModel):
    is_available: Optional[bool] = None
    total_spots: Optional[int] = None


class ParkingSpotRequest(CommonQueryParams):
    is_available: Optional[bool] = None


class ParkingSpotOut(ParkingSpotBase):
    id: UUID
    owner_id: UUID
    total_spots: int
    occupied_spots: int
    is_available: bool
    created_at: datetime
    updated_at: datetime


class ParkingSpotDetailOut(ParkingSpotOut):
    active_bookings: int = 0
    slips: int = 0


class ParkingSpotsResponse(BaseModel):
    parking_spots: List[ParkingSpotDetailOut]
    total: int

    model_config = {"from_attributes": True}


class NearbyParkingSpotOut(ParkingSpotBase):
    id: UUID
    total_spots: int
    occupied_spots: int
    available_spots: int
    is_available: bool


class NearbyParkingSpotsResponse(BaseModel):
    spots: List[NearbyParkingSpotOut]
    total_found: int


class PublicParkingSpotOut(ParkingSpotBase):
    id: UUID


class PublicParkingSpotsResponse(BaseModel):
    spots: List[PublicParkingSpotOut]
