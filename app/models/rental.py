"""
Rental records: the pickup-to-return row for a reservation in active rental.
At most one per reservation. return_date stays NULL while the car is out.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.enums import PaymentStatus


class Rental(Base):
    __tablename__ = "rentals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id", ondelete="CASCADE"),
                            unique=True, nullable=False)
    pickup_branch_id = Column(Integer, ForeignKey("branches.id"))
    dropoff_branch_id = Column(Integer, ForeignKey("branches.id"))
    rental_date = Column(DateTime, nullable=False)
    return_date = Column(DateTime)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.UNPAID.value)

    reservation = relationship("Reservation", back_populates="rental")

    @property
    def is_open(self) -> bool:
        return self.return_date is None

    def __repr__(self):
        return f"<Rental {self.id} reservation={self.reservation_id} payment={self.payment_status}>"
