from enum import Enum


class UserRole(str, Enum):
    USER = "USER"
    OWNER = "OWNER"


class UserStatus(str, Enum):
    active = "active"
    inactive = "inactive"
