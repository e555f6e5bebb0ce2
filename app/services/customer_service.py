"""
Customer directory: listing, search, CRUD and find-or-create by license
number for fast reservation entry.
"""

from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.database import LIKE_ESCAPE, contains_pattern
from app.models.customer import Customer
from app.services.auth_service import AuthContext
from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.utils.logger import get_logger

logger = get_logger(__name__)


def list_customers(db: Session):
    """Newest first."""
    return db.query(Customer).order_by(Customer.id.desc()).all()


def search_customers(db: Session, text: str):
    pattern = contains_pattern(text)
    return (
        db.query(Customer)
        .filter(or_(Customer.full_name.ilike(pattern, escape=LIKE_ESCAPE),
                    Customer.license_no.ilike(pattern, escape=LIKE_ESCAPE)))
        .order_by(Customer.id.desc())
        .all()
    )


def get_customer(db: Session, customer_id: int) -> Customer:
    customer = db.get(Customer, customer_id)
    if customer is None:
        raise NotFoundError("Customer", customer_id)
    return customer


def find_customer_by_license(db: Session, license_no: str):
    return db.query(Customer).filter(Customer.license_no == license_no).first()


def _check_fields(full_name: str, license_no: str):
    if not (full_name or "").strip():
        raise ValidationError("Customer name is required")
    if not (license_no or "").strip():
        raise ValidationError("License number is required")


def create_customer(ctx: AuthContext, db: Session, full_name: str, phone: str, license_no: str) -> Customer:
    ctx.require_login()
    _check_fields(full_name, license_no)

    customer = Customer(full_name=full_name.strip(), phone=phone, license_no=license_no.strip())
    db.add(customer)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"A customer with license {license_no} already exists")
    db.refresh(customer)
    logger.info(f"Customer added: {customer.full_name} ({customer.license_no})")
    return customer


def update_customer(ctx: AuthContext, db: Session, customer_id: int,
                    full_name: str, phone: str, license_no: str) -> Customer:
    ctx.require_login()
    _check_fields(full_name, license_no)

    customer = get_customer(db, customer_id)
    customer.full_name = full_name.strip()
    customer.phone = phone
    customer.license_no = license_no.strip()
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"A customer with license {license_no} already exists")
    db.refresh(customer)
    logger.info(f"Customer {customer_id} updated")
    return customer


def delete_customer(ctx: AuthContext, db: Session, customer_id: int):
    ctx.require_login()
    customer = get_customer(db, customer_id)
    db.delete(customer)
    db.commit()
    logger.info(f"Customer {customer_id} deleted")


def find_or_create_by_license(ctx: AuthContext, db: Session,
                              full_name: str, phone: str, license_no: str) -> int:
    """
    Return the id of the customer holding license_no, creating one if needed.
    An existing customer is returned unchanged even if name/phone differ.
    The unique constraint on license_no settles a concurrent insert: the
    loser rolls back and picks up the winner's row.
    """
    ctx.require_login()
    _check_fields(full_name, license_no)
    license_no = license_no.strip()

    existing = find_customer_by_license(db, license_no)
    if existing:
        return existing.id

    customer = Customer(full_name=full_name.strip(), phone=phone, license_no=license_no)
    db.add(customer)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = find_customer_by_license(db, license_no)
        if existing is None:
            raise
        logger.info(f"License {license_no} inserted concurrently, reusing customer {existing.id}")
        return existing.id

    logger.info(f"Customer created from reservation entry: {customer.full_name} ({license_no})")
    return customer.id
