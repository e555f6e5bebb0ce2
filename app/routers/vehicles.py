"""Vehicle registry: fleet listing, admin CRUD, status override and release."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.routers.auth import get_auth
from app.schemas.vehicle import VehicleCreate, VehicleOut, VehicleStatusUpdate, BranchCreate, BranchOut
from app.services import vehicle_service, reservation_service
from app.services.auth_service import AuthContext

router = APIRouter()


@router.get("/vehicles", response_model=list[VehicleOut], summary="List vehicles, optional text search")
def list_vehicles(q: Optional[str] = None, db: Session = Depends(get_db)):
    if q:
        return vehicle_service.search_vehicles(db, q)
    return vehicle_service.list_vehicles(db)


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut)
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    return vehicle_service.get_vehicle(db, vehicle_id)


@router.post("/vehicles", response_model=VehicleOut, status_code=201, summary="Add a vehicle (ADMIN)")
def create_vehicle(body: VehicleCreate, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return vehicle_service.create_vehicle(
        ctx, db, plate=body.plate, brand=body.brand, model=body.model,
        daily_rate=body.daily_rate, branch_id=body.branch_id, status=body.status,
    )


@router.delete("/vehicles/{vehicle_id}", summary="Delete a vehicle and its reservations (ADMIN)")
def delete_vehicle(vehicle_id: int, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    vehicle_service.delete_vehicle(ctx, db, vehicle_id)
    return {"status": "deleted", "vehicle_id": vehicle_id}


@router.put("/vehicles/{vehicle_id}/status", response_model=VehicleOut,
            summary="Override vehicle status (ADMIN, bypasses lifecycle checks)")
def set_vehicle_status(vehicle_id: int, body: VehicleStatusUpdate,
                       ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return vehicle_service.set_vehicle_status(ctx, db, vehicle_id, body.status)


@router.post("/vehicles/{vehicle_id}/release", response_model=VehicleOut,
             summary="Return a RENTED vehicle with no open rental to AVAILABLE")
def release_vehicle(vehicle_id: int, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return reservation_service.release_vehicle(ctx, db, vehicle_id)


@router.get("/branches", response_model=list[BranchOut])
def list_branches(db: Session = Depends(get_db)):
    return vehicle_service.list_branches(db)


@router.post("/branches", response_model=BranchOut, status_code=201, summary="Add a branch (ADMIN)")
def create_branch(body: BranchCreate, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return vehicle_service.create_branch(ctx, db, body.name, body.city)
