# app/schemas/reservation.py
from pydantic import BaseModel
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


class ReservationCreate(BaseModel):
    customer_id: int
    vehicle_id: int
    start_date: date
    end_date: date
    total_price: Decimal


class ReservationBook(BaseModel):
    """Fast entry: customer details + vehicle + dates. Price is computed."""
    full_name: str
    phone: Optional[str] = None
    license_no: str
    vehicle_id: int
    start_date: date
    end_date: date


class ReservationOut(BaseModel):
    id: int
    vehicle_id: int
    customer_id: int
    start_date: date
    end_date: date
    total_price: float
    status: str
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class ReservationRow(BaseModel):
    """Listing row joined with vehicle and customer."""
    id: int
    vehicle_id: int
    customer_id: int
    status: str
    start_date: date
    end_date: date
    total_price: float
    brand: str
    model: str
    plate: str
    customer_name: str


class RentalOut(BaseModel):
    id: int
    reservation_id: int
    pickup_branch_id: Optional[int]
    dropoff_branch_id: Optional[int]
    rental_date: datetime
    return_date: Optional[datetime]
    payment_status: str

    class Config:
        from_attributes = True
