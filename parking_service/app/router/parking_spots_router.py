from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID

from ..crud import parking_spot_crud as crud
from ..schemas.parking_spot_schemas import (
    NearbyParkingSpotsResponse,
    ParkingSpotCreate,
    ParkingSpotDetailOut,
    ParkingSpotRequest,
    ParkingSpotsResponse,
    ParkingSpotUpdate,
    PublicParkingSpotsResponse,
)
from shared.core.auth import allow_owner
from shared.core.database import get_parking_db as get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode

router = APIRouter(
    prefix="/api/admin/parking-spots",
    tags=["parking-spots"],
    dependencies=[Depends(allow_owner)]
)

public_router = APIRouter(prefix="/api/parking-spots", tags=["parking-spots"])


@public_router.get("/", response_model=JsonOutResult[PublicParkingSpotsResponse])
def get_available_parking_spots(db: Session = Depends(get_db)):
    return success_response(data=crud.get_available_parking_spots(db))


@public_router.get("/nearby", response_model=JsonOutResult[NearbyParkingSpotsResponse])
def get_nearby_parking_spots(db: Session = Depends(get_db)):
    return success_response(data=crud.get_nearby_parking_spots(db))


@router.get("/", response_model=JsonOutResult[ParkingSpotsResponse])
def get_parking_spots(
    params: ParkingSpotRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(data=crud.get_parking_spots(db, current_user.user_id, params))


@router.post("/", status_code=201)
def create_parking_spot(
    spot: ParkingSpotCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(
        data=crud.create_parking_spot(db, current_user.user_id, spot),
        message="Parking spot created",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.get("/{spot_id}", response_model=JsonOutResult[ParkingSpotDetailOut])
def get_parking_spot(
    spot_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(data=crud.get_parking_spot_details(db, current_user.user_id, spot_id))


@router.patch("/{spot_id}")
def update_parking_spot(
    spot_id: UUID,
    data: ParkingSpotUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(
        data=crud.update_parking_spot(db, current_user.user_id, spot_id, data),
        message="Parking spot updated",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{spot_id}")
def delete_parking_spot(
    spot_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(
        data=crud.delete_parking_spot(db, current_user.user_id, spot_id),
        message="Parking spot deleted successfully",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )
