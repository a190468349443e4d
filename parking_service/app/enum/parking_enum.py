from enum import Enum


class BookingStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class SlipStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    EXPIRED = "EXPIRED"
    USED = "USED"


class BookingAction(str, Enum):
    complete = "complete"
    cancel = "cancel"


class SlipAction(str, Enum):
    complete = "complete"
