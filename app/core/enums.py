from enum import Enum


class Role(str, Enum):
    SUPERADMIN = "superadmin"
    ADMIN = "admin"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class CapacityMode(str, Enum):
    OPTIMISTIC = "optimistic"
    STRICT = "strict"


SCHOOL_STAFF_ROLES = frozenset({Role.SUPERADMIN, Role.ADMIN})
