"""
Vehicle registry: fleet listing, search, admin CRUD and the admin status
override. Lifecycle-driven status changes live in reservation_service.
"""

from decimal import Decimal, InvalidOperation
from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.database import LIKE_ESCAPE, contains_pattern
from app.models.vehicle import Vehicle
from app.models.branch import Branch
from app.models.reservation import Reservation
from app.models.enums import VehicleStatus, ReservationStatus
from app.services.auth_service import AuthContext
from app.services.rental_service import has_open_rental_for_vehicle
from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.utils.logger import get_logger

logger = get_logger(__name__)

VEHICLE_STATUSES = {s.value for s in VehicleStatus}


def normalize_plate(plate: str) -> str:
    return (plate or "").strip().upper()


def list_vehicles(db: Session):
    return db.query(Vehicle).order_by(Vehicle.id).all()


def search_vehicles(db: Session, text: str):
    """Case-insensitive substring match over brand, model and plate."""
    pattern = contains_pattern(text)
    return (
        db.query(Vehicle)
        .filter(or_(Vehicle.brand.ilike(pattern, escape=LIKE_ESCAPE),
                    Vehicle.model.ilike(pattern, escape=LIKE_ESCAPE),
                    Vehicle.plate.ilike(pattern, escape=LIKE_ESCAPE)))
        .order_by(Vehicle.id)
        .all()
    )


def get_vehicle(db: Session, vehicle_id: int) -> Vehicle:
    vehicle = db.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise NotFoundError("Vehicle", vehicle_id)
    return vehicle


def lookup_vehicle_by_plate(db: Session, plate: str):
    """Find a vehicle by plate number. Returns None if not found."""
    return db.query(Vehicle).filter(Vehicle.plate == normalize_plate(plate)).first()


def create_vehicle(ctx: AuthContext, db: Session, plate: str, brand: str, model: str,
                   daily_rate, branch_id: int = None,
                   status: str = VehicleStatus.AVAILABLE.value) -> Vehicle:
    ctx.require_admin()

    plate = normalize_plate(plate)
    if not plate:
        raise ValidationError("Plate is required")
    try:
        rate = Decimal(str(daily_rate))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Daily rate '{daily_rate}' is not a number")
    if rate < 0:
        raise ValidationError("Daily rate cannot be negative")
    if status not in VEHICLE_STATUSES:
        raise ValidationError(f"Unknown vehicle status '{status}'")

    if lookup_vehicle_by_plate(db, plate):
        raise ConflictError(f"Plate {plate} already registered", plate=plate)
    if branch_id is not None and db.get(Branch, branch_id) is None:
        raise NotFoundError("Branch", branch_id)

    vehicle = Vehicle(plate=plate, brand=brand, model=model, daily_rate=rate,
                      status=status, branch_id=branch_id)
    db.add(vehicle)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Plate {plate} already registered", plate=plate)
    db.refresh(vehicle)
    logger.info(f"Vehicle added: {plate} {brand} {model} @ {rate}/day")
    return vehicle


def delete_vehicle(ctx: AuthContext, db: Session, vehicle_id: int):
    """Reservations and rentals of the vehicle go with it."""
    ctx.require_admin()
    vehicle = get_vehicle(db, vehicle_id)
    plate = vehicle.plate
    db.delete(vehicle)
    db.commit()
    logger.info(f"Vehicle deleted: {plate}")


def set_vehicle_status(ctx: AuthContext, db: Session, vehicle_id: int, status: str) -> Vehicle:
    """
    Administrative override. Writes the status unconditionally, without the
    lifecycle guards, so it can leave the vehicle out of step with its
    reservations. When that happens it is logged at WARNING.
    """
    ctx.require_admin()
    if status not in VEHICLE_STATUSES:
        raise ValidationError(f"Unknown vehicle status '{status}'")

    vehicle = get_vehicle(db, vehicle_id)
    previous = vehicle.status
    _warn_on_desync(db, vehicle, status)

    vehicle.status = status
    db.commit()
    db.refresh(vehicle)
    logger.info(f"Vehicle {vehicle.plate} status override: {previous} → {status} by {ctx.username}")
    return vehicle


def _warn_on_desync(db: Session, vehicle: Vehicle, new_status: str):
    if new_status == vehicle.status:
        return
    if new_status != VehicleStatus.RENTED.value and has_open_rental_for_vehicle(db, vehicle.id):
        logger.warning(
            f"Override sets {vehicle.plate} to {new_status} while a rental is still open"
        )
    if new_status != VehicleStatus.AVAILABLE.value:
        approved = (
            db.query(Reservation.id)
            .filter(Reservation.vehicle_id == vehicle.id,
                    Reservation.status == ReservationStatus.APPROVED.value)
            .all()
        )
        if approved:
            ids = ", ".join(str(r.id) for r in approved)
            logger.warning(
                f"Override sets {vehicle.plate} to {new_status}; approved reservations [{ids}] "
                f"are now out of step with the vehicle"
            )


def list_branches(db: Session):
    return db.query(Branch).order_by(Branch.id).all()


def create_branch(ctx: AuthContext, db: Session, name: str, city: str = None) -> Branch:
    ctx.require_admin()
    name = (name or "").strip()
    if not name:
        raise ValidationError("Branch name is required")
    if db.query(Branch).filter(Branch.name == name).first():
        raise ConflictError(f"Branch '{name}' already exists")

    branch = Branch(name=name, city=city)
    db.add(branch)
    db.commit()
    db.refresh(branch)
    logger.info(f"Branch added: {name}")
    return branch
