from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from uuid import UUID

from ..crud import booking_crud as crud
from ..schemas.booking_schemas import (
    BookingCreate,
    BookingCreateResponse,
    BookingListResponse,
    BookingRequest,
    BookingUpdate,
)
from shared.core.auth import allow_owner
from shared.core.database import get_parking_db as get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode

# customers book without an account
public_router = APIRouter(prefix="/api/bookings", tags=["bookings"])

router = APIRouter(
    prefix="/api/admin/bookings",
    tags=["bookings"],
    dependencies=[Depends(allow_owner)]
)


@public_router.post("/", status_code=201, response_model=JsonOutResult[BookingCreateResponse])
def create_booking(
    booking: BookingCreate,
    db: Session = Depends(get_db)
):
    return success_response(
        data=crud.create_booking(db, booking),
        message="Booking created",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.get("/", response_model=JsonOutResult[BookingListResponse])
def get_bookings(
    params: BookingRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(data=crud.get_bookings(db, current_user.user_id, params))


@router.patch("/{booking_id}")
def update_booking(
    booking_id: UUID,
    data: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(
        data=crud.update_booking_status(
            db, current_user.user_id, booking_id, data.action),
        message="Booking updated",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_owner)
):
    return success_response(
        data=crud.delete_booking(db, current_user.user_id, booking_id),
        message="Booking deleted",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )
