"""
Fleet vehicles table.
status is written by the reservation lifecycle (approve/start/release) and by
the admin override in vehicle_service.set_vehicle_status.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.enums import VehicleStatus


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plate = Column(String(20), unique=True, nullable=False, index=True)  # stored uppercase
    brand = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    daily_rate = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default=VehicleStatus.AVAILABLE.value, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"))
    created_at = Column(DateTime, default=datetime.utcnow)

    branch = relationship("Branch", back_populates="vehicles")
    reservations = relationship("Reservation", back_populates="vehicle",
                                cascade="all, delete")

    def __repr__(self):
        return f"<Vehicle {self.plate} {self.brand} {self.model} status={self.status}>"
