# app/schemas/vehicle.py
from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Optional


class VehicleCreate(BaseModel):
    plate: str
    brand: str
    model: str
    daily_rate: Decimal
    branch_id: Optional[int] = None
    status: str = "AVAILABLE"


class VehicleStatusUpdate(BaseModel):
    status: str      # AVAILABLE | RENTED | MAINTENANCE


class VehicleOut(BaseModel):
    id: int
    plate: str
    brand: str
    model: str
    daily_rate: float
    status: str
    branch_id: Optional[int]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class BranchCreate(BaseModel):
    name: str
    city: Optional[str] = None


class BranchOut(BaseModel):
    id: int
    name: str
    city: Optional[str]

    class Config:
        from_attributes = True
