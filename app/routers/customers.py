"""Customer directory endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.routers.auth import get_auth
from app.schemas.customer import CustomerIn, CustomerOut
from app.services import customer_service
from app.services.auth_service import AuthContext

router = APIRouter()


@router.get("/customers", response_model=list[CustomerOut], summary="List customers, newest first")
def list_customers(q: Optional[str] = None, db: Session = Depends(get_db)):
    if q:
        return customer_service.search_customers(db, q)
    return customer_service.list_customers(db)


@router.post("/customers", response_model=CustomerOut, status_code=201)
def create_customer(body: CustomerIn, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return customer_service.create_customer(ctx, db, body.full_name, body.phone, body.license_no)


@router.post("/customers/find-or-create", summary="Resolve a customer id by license number")
def find_or_create(body: CustomerIn, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    customer_id = customer_service.find_or_create_by_license(ctx, db, body.full_name, body.phone, body.license_no)
    return {"customer_id": customer_id}


@router.put("/customers/{customer_id}", response_model=CustomerOut)
def update_customer(customer_id: int, body: CustomerIn,
                    ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return customer_service.update_customer(ctx, db, customer_id, body.full_name, body.phone, body.license_no)


@router.delete("/customers/{customer_id}")
def delete_customer(customer_id: int, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    customer_service.delete_customer(ctx, db, customer_id)
    return {"status": "deleted", "customer_id": customer_id}
