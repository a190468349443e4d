from shared.utils.app_status_code import AppStatusCode


class AppError(Exception):
    """Base for errors the API maps straight onto a response."""

    http_status = 500
    status_code = AppStatusCode.OPERATION_FAILED
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class CapacityExceeded(AppError):
    http_status = 409
    status_code = AppStatusCode.CAPACITY_EXCEEDED
    default_message = "Parking spot is full"


class CapacityBelowOccupancy(AppError):
    http_status = 409
    status_code = AppStatusCode.CAPACITY_BELOW_OCCUPANCY
    default_message = "total_spots cannot be less than currently occupied spots"


class NotFound(AppError):
    http_status = 404
    status_code = AppStatusCode.NOT_FOUND
    default_message = "Not found"


class AlreadyExists(AppError):
    http_status = 409
    status_code = AppStatusCode.ALREADY_EXISTS
    default_message = "Already exists"


class ValidationError(AppError):
    http_status = 400
    status_code = AppStatusCode.INVALID_INPUT
    default_message = "Invalid input"


class InternalError(AppError):
    pass
