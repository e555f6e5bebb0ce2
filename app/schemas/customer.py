# app/schemas/customer.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class CustomerIn(BaseModel):
    full_name: str
    phone: Optional[str] = None
    license_no: str


class CustomerOut(BaseModel):
    id: int
    full_name: str
    phone: Optional[str]
    license_no: str
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
