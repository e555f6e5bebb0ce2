"""
Customers. license_no is the natural dedup key used by find-or-create,
backed by a unique constraint.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from app.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(200), nullable=False)
    phone = Column(String(50))
    license_no = Column(String(50), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    reservations = relationship("Reservation", back_populates="customer",
                                cascade="all, delete")

    def __repr__(self):
        return f"<Customer {self.id} {self.full_name} license={self.license_no}>"
