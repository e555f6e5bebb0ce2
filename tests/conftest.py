"""Shared fixtures: in-memory SQLite database, seeded accounts and auth contexts."""

import os
import sys

os.environ["DATABASE_URL"] = "sqlite://"
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from app.database import SessionLocal, create_tables, drop_tables
from app.models.user import User
from app.models.branch import Branch
from app.models.enums import Role
from app.services.auth_service import AuthContext
from app.services.vehicle_service import create_vehicle
from app.services.customer_service import create_customer


@pytest.fixture
def db():
    create_tables()
    session = SessionLocal()
    session.add_all([
        User(username="admin", password="admin123", role=Role.ADMIN.value),
        User(username="staff", password="staff123", role=Role.STAFF.value),
        Branch(name="Head Office", city="Ankara"),
    ])
    session.commit()
    yield session
    session.close()
    drop_tables()


@pytest.fixture
def admin():
    return AuthContext(role=Role.ADMIN.value, username="admin")


@pytest.fixture
def staff():
    return AuthContext(role=Role.STAFF.value, username="staff")


@pytest.fixture
def anonymous():
    return AuthContext()


@pytest.fixture
def branch(db):
    return db.query(Branch).filter(Branch.name == "Head Office").one()


@pytest.fixture
def make_vehicle(db, admin, branch):
    counter = {"n": 0}

    def _make(daily_rate=100, status="AVAILABLE", plate=None):
        counter["n"] += 1
        return create_vehicle(admin, db, plate=plate or f"34 ABC {counter['n']:03d}",
                              brand="Ford", model="Focus", daily_rate=daily_rate,
                              branch_id=branch.id, status=status)
    return _make


@pytest.fixture
def customer(db, staff):
    return create_customer(staff, db, "Ali Yilmaz", "0555 123 45 67", "LIC-0001")
