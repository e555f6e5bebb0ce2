"""
Rental record keeper.
One rental per reservation, opened only by reservation_service.start_rental
and closed by finish_rental. These helpers flush but never commit: the
calling lifecycle transition owns the transaction.
"""

from datetime import datetime
from sqlalchemy.orm import Session
from app.models.rental import Rental
from app.models.reservation import Reservation
from app.models.enums import PaymentStatus


def open_rental(db: Session, reservation: Reservation, vehicle, when: datetime = None) -> Rental:
    """Pickup and drop-off branch both default to the vehicle's home branch."""
    rental = Rental(
        reservation=reservation,
        pickup_branch_id=vehicle.branch_id,
        dropoff_branch_id=vehicle.branch_id,
        rental_date=when or datetime.utcnow(),
        return_date=None,
        payment_status=PaymentStatus.UNPAID.value,
    )
    db.add(rental)
    db.flush()
    return rental


def get_open_rental(db: Session, reservation_id: int):
    return (
        db.query(Rental)
        .filter(Rental.reservation_id == reservation_id, Rental.return_date.is_(None))
        .with_for_update()
        .first()
    )


def close_rental(rental: Rental, when: datetime = None) -> Rental:
    rental.return_date = when or datetime.utcnow()
    rental.payment_status = PaymentStatus.PAID.value
    return rental


def has_open_rental_for_vehicle(db: Session, vehicle_id: int) -> bool:
    return (
        db.query(Rental)
        .join(Reservation, Rental.reservation_id == Reservation.id)
        .filter(Reservation.vehicle_id == vehicle_id, Rental.return_date.is_(None))
        .first()
    ) is not None


def list_rentals(db: Session, open_only: bool = False):
    """Newest first. open_only restricts to rentals with no return date."""
    q = db.query(Rental)
    if open_only:
        q = q.filter(Rental.return_date.is_(None))
    return q.order_by(Rental.id.desc()).all()
