"""
Reservation lifecycle engine.

  PENDING ──approve──▶ APPROVED ──start_rental──▶ ACTIVE_RENTAL ──finish_rental──▶ COMPLETED
     └──────────────┴──────────── cancel ─────────────┴──▶ CANCELLED

Each transition is one transaction: the reservation and its vehicle are read
together with SELECT ... FOR UPDATE, the guards run, and the reservation,
vehicle and rental writes are committed together or not at all.

finish_rental does not put the vehicle back to AVAILABLE unless
RELEASE_VEHICLE_ON_FINISH is set; release_vehicle does that explicitly.
"""

from datetime import date, datetime
from typing import Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.config import settings
from app.database import LIKE_ESCAPE, atomic, contains_pattern
from app.models.customer import Customer
from app.models.reservation import Reservation
from app.models.vehicle import Vehicle
from app.models.enums import ReservationStatus, VehicleStatus, TERMINAL_RESERVATION_STATUSES
from app.services.auth_service import AuthContext
from app.services import rental_service
from app.services.customer_service import find_or_create_by_license, get_customer
from app.services.pricing import calculate_price
from app.services.vehicle_service import get_vehicle
from app.exceptions import ConflictError, NotFoundError
from app.utils.logger import get_logger

logger = get_logger(__name__)


# ── Reads ─────────────────────────────────────────────────────────────────────

def _row(reservation: Reservation, vehicle: Vehicle, customer: Customer) -> dict:
    return {
        "id": reservation.id,
        "vehicle_id": reservation.vehicle_id,
        "customer_id": reservation.customer_id,
        "status": reservation.status,
        "start_date": reservation.start_date,
        "end_date": reservation.end_date,
        "total_price": reservation.total_price,
        "brand": vehicle.brand,
        "model": vehicle.model,
        "plate": vehicle.plate,
        "customer_name": customer.full_name,
    }


def _joined(db: Session):
    return (
        db.query(Reservation, Vehicle, Customer)
        .join(Vehicle, Reservation.vehicle_id == Vehicle.id)
        .join(Customer, Reservation.customer_id == Customer.id)
    )


def list_reservations(db: Session) -> list:
    """Reservation rows joined with vehicle and customer, newest first."""
    rows = _joined(db).order_by(Reservation.id.desc()).all()
    return [_row(*r) for r in rows]


def search_reservations(db: Session, text: str) -> list:
    """Case-insensitive substring match on status or customer name."""
    pattern = contains_pattern(text)
    rows = (
        _joined(db)
        .filter(or_(Reservation.status.ilike(pattern, escape=LIKE_ESCAPE),
                    Customer.full_name.ilike(pattern, escape=LIKE_ESCAPE)))
        .order_by(Reservation.id.desc())
        .all()
    )
    return [_row(*r) for r in rows]


def get_reservation(db: Session, reservation_id: int) -> Reservation:
    reservation = db.get(Reservation, reservation_id)
    if reservation is None:
        raise NotFoundError("Reservation", reservation_id)
    return reservation


def _lock_with_vehicle(db: Session, reservation_id: int):
    """Join-shaped read used by every transition guard. Locks both rows."""
    row = (
        db.query(Reservation, Vehicle)
        .join(Vehicle, Reservation.vehicle_id == Vehicle.id)
        .filter(Reservation.id == reservation_id)
        .with_for_update()
        .first()
    )
    if row is None:
        raise NotFoundError("Reservation", reservation_id)
    return row


def _reject(message: str, vehicle: Vehicle = None) -> ConflictError:
    logger.warning(f"Transition rejected: {message}")
    if vehicle is None:
        return ConflictError(message)
    return ConflictError(message, plate=vehicle.plate, status=vehicle.status)


# ── Creation ──────────────────────────────────────────────────────────────────

def add_reservation(ctx: AuthContext, db: Session, customer_id: int, vehicle_id: int,
                    start_date: date, end_date: date, total_price) -> Reservation:
    """
    Insert a PENDING reservation. Dates and price are taken as given and the
    vehicle status is not touched; book_reservation is the validating caller.
    """
    ctx.require_login()
    customer = get_customer(db, customer_id)
    vehicle = get_vehicle(db, vehicle_id)

    reservation = Reservation(
        customer=customer,
        vehicle=vehicle,
        start_date=start_date,
        end_date=end_date,
        total_price=total_price,
        status=ReservationStatus.PENDING.value,
    )
    with atomic(db):
        db.add(reservation)
    db.refresh(reservation)
    logger.info(f"Reservation {reservation.id} created: vehicle={vehicle_id} customer={customer_id} "
                f"{start_date}→{end_date} total={total_price}")
    return reservation


def book_reservation(ctx: AuthContext, db: Session, full_name: str, phone: str, license_no: str,
                     vehicle_id: int, start_date: date, end_date: date,
                     today: Optional[date] = None) -> Reservation:
    """
    Fast reservation entry: quote the price (rejecting bad date ranges),
    find or create the customer by license, then add the reservation.
    """
    ctx.require_login()
    vehicle = get_vehicle(db, vehicle_id)
    price = calculate_price(vehicle.daily_rate, start_date, end_date, today=today)
    customer_id = find_or_create_by_license(ctx, db, full_name, phone, license_no)
    return add_reservation(ctx, db, customer_id, vehicle_id, start_date, end_date, price)


# ── Transitions ───────────────────────────────────────────────────────────────

def approve_reservation(ctx: AuthContext, db: Session, reservation_id: int) -> Reservation:
    """PENDING → APPROVED. The vehicle must be AVAILABLE; its status is left as is."""
    ctx.require_login()
    with atomic(db):
        reservation, vehicle = _lock_with_vehicle(db, reservation_id)
        if reservation.status != ReservationStatus.PENDING.value:
            raise _reject(f"Reservation {reservation_id} is {reservation.status}, only PENDING can be approved")
        if vehicle.status != VehicleStatus.AVAILABLE.value:
            raise _reject(f"Vehicle {vehicle.plate} is {vehicle.status} and cannot be approved", vehicle)
        reservation.status = ReservationStatus.APPROVED.value

    logger.info(f"Reservation {reservation_id} approved ({vehicle.plate})")
    return reservation


def start_rental(ctx: AuthContext, db: Session, reservation_id: int):
    """
    APPROVED → ACTIVE_RENTAL. Opens the rental record at the vehicle's home
    branch and marks the vehicle RENTED.
    """
    ctx.require_login()
    with atomic(db):
        reservation, vehicle = _lock_with_vehicle(db, reservation_id)
        if reservation.status != ReservationStatus.APPROVED.value:
            raise _reject(f"Reservation {reservation_id} is {reservation.status}, only APPROVED can start a rental")
        if vehicle.status == VehicleStatus.RENTED.value:
            raise _reject(f"Vehicle {vehicle.plate} is already RENTED", vehicle)

        vehicle.status = VehicleStatus.RENTED.value
        reservation.status = ReservationStatus.ACTIVE_RENTAL.value
        rental = rental_service.open_rental(db, reservation, vehicle)

    logger.info(f"🚗 Rental {rental.id} started for reservation {reservation_id} ({vehicle.plate})")
    return rental


def finish_rental(ctx: AuthContext, db: Session, reservation_id: int):
    """
    Close the open rental: return date now, payment PAID, reservation COMPLETED.

    A reservation cancelled mid-rental keeps CANCELLED; only its rental is
    closed, which lets release_vehicle free the car afterwards.

    With no open rental this is a no-op returning None, or NotFoundError when
    STRICT_FINISH_RENTAL is set.
    """
    ctx.require_login()
    with atomic(db):
        rental = rental_service.get_open_rental(db, reservation_id)
        if rental is None:
            if settings.STRICT_FINISH_RENTAL:
                raise NotFoundError("Open rental for reservation", reservation_id)
            logger.warning(f"finish_rental: reservation {reservation_id} has no open rental, nothing to do")
            return None

        rental_service.close_rental(rental, datetime.utcnow())
        reservation = rental.reservation
        if reservation.status == ReservationStatus.ACTIVE_RENTAL.value:
            reservation.status = ReservationStatus.COMPLETED.value
        else:
            logger.warning(f"finish_rental: reservation {reservation_id} is {reservation.status}, "
                           f"rental {rental.id} closed without changing it")
        if settings.RELEASE_VEHICLE_ON_FINISH:
            reservation.vehicle.status = VehicleStatus.AVAILABLE.value

    logger.info(f"🏁 Rental {rental.id} finished for reservation {reservation_id}, payment PAID")
    return rental


def cancel_reservation(ctx: AuthContext, db: Session, reservation_id: int) -> Reservation:
    """Any non-terminal state → CANCELLED. The row is kept; vehicle status is not reverted."""
    ctx.require_login()
    with atomic(db):
        reservation, _vehicle = _lock_with_vehicle(db, reservation_id)
        if reservation.status in {s.value for s in TERMINAL_RESERVATION_STATUSES}:
            raise _reject(f"Reservation {reservation_id} is already {reservation.status}")
        previous = reservation.status
        reservation.status = ReservationStatus.CANCELLED.value

    logger.info(f"Reservation {reservation_id} cancelled (was {previous})")
    return reservation


def delete_reservation(ctx: AuthContext, db: Session, reservation_id: int):
    """Remove the rental row first, then the reservation."""
    ctx.require_login()
    with atomic(db):
        reservation = get_reservation(db, reservation_id)
        if reservation.rental is not None:
            reservation.rental = None   # delete-orphan removes the row
            db.flush()
        db.delete(reservation)

    logger.info(f"Reservation {reservation_id} deleted")


def release_vehicle(ctx: AuthContext, db: Session, vehicle_id: int) -> Vehicle:
    """RENTED → AVAILABLE once the vehicle has no open rental."""
    ctx.require_login()
    with atomic(db):
        vehicle = (
            db.query(Vehicle)
            .filter(Vehicle.id == vehicle_id)
            .with_for_update()
            .first()
        )
        if vehicle is None:
            raise NotFoundError("Vehicle", vehicle_id)
        if vehicle.status != VehicleStatus.RENTED.value:
            raise _reject(f"Vehicle {vehicle.plate} is {vehicle.status}, only RENTED vehicles can be released",
                          vehicle)
        if rental_service.has_open_rental_for_vehicle(db, vehicle_id):
            raise _reject(f"Vehicle {vehicle.plate} still has an open rental", vehicle)
        vehicle.status = VehicleStatus.AVAILABLE.value

    logger.info(f"Vehicle {vehicle.plate} released, now AVAILABLE")
    return vehicle
