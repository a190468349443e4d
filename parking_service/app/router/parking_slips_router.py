from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID

from ..crud import parking_slip_crud as crud
from ..schemas.parking_slip_schemas import (
    ExpireSlipsOut,
    ParkingSlipCreate,
    ParkingSlipOut,
    ParkingSlipRequest,
    ParkingSlipResponse,
    ParkingSlipUpdate,
)
from shared.core.auth import allow_owner
from shared.core.database import get_parking_db as get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode

router = APIRouter(
    prefix="/api/admin/slips",
    tags=["parking-slips"],
    dependencies=[Depends(allow_owner)]
)


@router.get("/", response_model=JsonOutResult[ParkingSlipResponse])
def get_parking_slips(
    params: ParkingSlipRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(data=crud.get_parking_slips(db, current_user.user_id, params))


@router.post("/", status_code=201, response_model=JsonOutResult[ParkingSlipOut])
def create_parking_slip(
    data: ParkingSlipCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(
        data=crud.create_parking_slip(db, current_user.user_id, data),
        message="Slip created",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


# declared before /{slip_id} so "clear" is never read as an id
@router.delete("/clear")
def clear_all(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(
        data=crud.clear_owner_data(db, current_user.user_id),
        message="All data cleared successfully",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )


@router.post("/expire", response_model=JsonOutResult[ExpireSlipsOut])
def expire_parking_slips(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(
        data=crud.expire_parking_slips(db, current_user.user_id),
        message="Overdue slips expired",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.patch("/{slip_id}")
def update_parking_slip(
    slip_id: UUID,
    data: ParkingSlipUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(
        data=crud.complete_parking_slip(
            db, current_user.user_id, slip_id, revenue=data.revenue),
        message="Slip completed",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{slip_id}")
def delete_parking_slip(
    slip_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(
        data=crud.delete_parking_slip(db, current_user.user_id, slip_id),
        message="Slip deleted",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )
