"""
Reservation endpoints: listing plus the lifecycle commands.
POST /reservations/{id}/approve | start | finish | cancel
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.routers.auth import get_auth
from app.schemas.reservation import (
    ReservationCreate, ReservationBook, ReservationOut, ReservationRow, RentalOut,
)
from app.services import reservation_service, rental_service
from app.services.auth_service import AuthContext

router = APIRouter()


@router.get("/reservations", response_model=list[ReservationRow], summary="List reservations, newest first")
def list_reservations(q: Optional[str] = None, db: Session = Depends(get_db)):
    if q:
        return reservation_service.search_reservations(db, q)
    return reservation_service.list_reservations(db)


@router.get("/reservations/{reservation_id}", response_model=ReservationOut)
def get_reservation(reservation_id: int, db: Session = Depends(get_db)):
    return reservation_service.get_reservation(db, reservation_id)


@router.post("/reservations", response_model=ReservationOut, status_code=201,
             summary="Add a PENDING reservation with a precomputed price")
def add_reservation(body: ReservationCreate, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return reservation_service.add_reservation(
        ctx, db, body.customer_id, body.vehicle_id, body.start_date, body.end_date, body.total_price,
    )


@router.post("/reservations/book", response_model=ReservationOut, status_code=201,
             summary="Fast entry: find/create customer, price the dates, add reservation")
def book_reservation(body: ReservationBook, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return reservation_service.book_reservation(
        ctx, db, body.full_name, body.phone, body.license_no,
        body.vehicle_id, body.start_date, body.end_date,
    )


@router.post("/reservations/{reservation_id}/approve", response_model=ReservationOut)
def approve(reservation_id: int, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return reservation_service.approve_reservation(ctx, db, reservation_id)


@router.post("/reservations/{reservation_id}/start", response_model=RentalOut)
def start(reservation_id: int, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return reservation_service.start_rental(ctx, db, reservation_id)


@router.post("/reservations/{reservation_id}/finish", response_model=Optional[RentalOut],
             summary="Close the open rental (null when there is none)")
def finish(reservation_id: int, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return reservation_service.finish_rental(ctx, db, reservation_id)


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationOut)
def cancel(reservation_id: int, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return reservation_service.cancel_reservation(ctx, db, reservation_id)


@router.delete("/reservations/{reservation_id}")
def delete(reservation_id: int, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    reservation_service.delete_reservation(ctx, db, reservation_id)
    return {"status": "deleted", "reservation_id": reservation_id}


@router.get("/rentals", response_model=list[RentalOut], summary="Rental records, newest first")
def list_rentals(open_only: bool = False, db: Session = Depends(get_db)):
    return rental_service.list_rentals(db, open_only=open_only)
