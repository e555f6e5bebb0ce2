# app/models/enums.py
"""
Status vocabularies shared by models, services and schemas.
Values are stored as plain strings in the database.
"""

import enum


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"


class VehicleStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    RENTED = "RENTED"
    MAINTENANCE = "MAINTENANCE"


class ReservationStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    ACTIVE_RENTAL = "ACTIVE_RENTAL"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, enum.Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"


TERMINAL_RESERVATION_STATUSES = {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED}
