"""HTTP command surface: login tokens, error mapping and the lifecycle endpoints."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient
from app.main import app

API = "/api/v1"


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c


def login(client, username, password):
    resp = client.post(f"{API}/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200
    return {"X-Session-Token": resp.json()["token"]}


class TestAuthEndpoints:
    def test_login_and_me(self, client):
        headers = login(client, "staff", "staff123")
        me = client.get(f"{API}/auth/me", headers=headers).json()
        assert me == {"username": "staff", "role": "STAFF"}

    def test_bad_login(self, client):
        resp = client.post(f"{API}/auth/login", json={"username": "staff", "password": "x"})
        assert resp.status_code == 401

    def test_logout_invalidates_token(self, client):
        headers = login(client, "staff", "staff123")
        client.post(f"{API}/auth/logout", headers=headers)
        assert client.get(f"{API}/auth/me", headers=headers).json()["role"] is None

    def test_new_login_replaces_old_token(self, client):
        first = login(client, "staff", "staff123")
        second = login(client, "staff", "staff123")
        admin = login(client, "admin", "admin123")

        assert client.get(f"{API}/auth/me", headers=first).json()["role"] is None
        assert client.get(f"{API}/auth/me", headers=second).json()["username"] == "staff"
        assert client.get(f"{API}/auth/me", headers=admin).json()["username"] == "admin"


class TestErrorMapping:
    def test_no_token_is_forbidden(self, client):
        resp = client.post(f"{API}/vehicles", json={
            "plate": "AA 1", "brand": "BMW", "model": "320i", "daily_rate": 10})
        assert resp.status_code == 403
        assert resp.json()["error"] == "authorization_error"

    def test_staff_cannot_add_vehicle(self, client):
        headers = login(client, "staff", "staff123")
        resp = client.post(f"{API}/vehicles", headers=headers, json={
            "plate": "AA 1", "brand": "BMW", "model": "320i", "daily_rate": 10})
        assert resp.status_code == 403

    def test_negative_rate_is_422(self, client):
        headers = login(client, "admin", "admin123")
        resp = client.post(f"{API}/vehicles", headers=headers, json={
            "plate": "AA 1", "brand": "BMW", "model": "320i", "daily_rate": -5})
        assert resp.status_code == 422
        assert resp.json()["error"] == "validation_error"

    def test_missing_reservation_is_404(self, client):
        headers = login(client, "staff", "staff123")
        resp = client.post(f"{API}/reservations/999/approve", headers=headers)
        assert resp.status_code == 404


class TestLifecycleOverHttp:
    def test_book_approve_start_finish(self, client):
        admin = login(client, "admin", "admin123")
        staff = login(client, "staff", "staff123")

        vehicle = client.post(f"{API}/vehicles", headers=admin, json={
            "plate": "34 abc 123", "brand": "Ford", "model": "Focus", "daily_rate": 100}).json()
        assert vehicle["plate"] == "34 ABC 123"

        start = date.today()
        booked = client.post(f"{API}/reservations/book", headers=staff, json={
            "full_name": "Ali Yilmaz", "phone": "0555", "license_no": "LIC-1",
            "vehicle_id": vehicle["id"],
            "start_date": start.isoformat(), "end_date": (start + timedelta(days=3)).isoformat(),
        })
        assert booked.status_code == 201
        rid = booked.json()["id"]
        assert booked.json()["total_price"] == 300.0
        assert booked.json()["status"] == "PENDING"

        assert client.post(f"{API}/reservations/{rid}/approve", headers=staff).json()["status"] == "APPROVED"
        rental = client.post(f"{API}/reservations/{rid}/start", headers=staff).json()
        assert rental["payment_status"] == "UNPAID"
        assert client.get(f"{API}/vehicles/{vehicle['id']}").json()["status"] == "RENTED"

        # a second booking cannot be approved while the car is out
        other = client.post(f"{API}/reservations/book", headers=staff, json={
            "full_name": "Ali Yilmaz", "phone": "0555", "license_no": "LIC-1",
            "vehicle_id": vehicle["id"],
            "start_date": start.isoformat(), "end_date": start.isoformat(),
        }).json()
        conflict = client.post(f"{API}/reservations/{other['id']}/approve", headers=staff)
        assert conflict.status_code == 409
        assert "34 ABC 123" in conflict.json()["detail"]

        assert [r["reservation_id"] for r in client.get(f"{API}/rentals?open_only=true").json()] == [rid]

        finished = client.post(f"{API}/reservations/{rid}/finish", headers=staff).json()
        assert finished["payment_status"] == "PAID"
        assert finished["return_date"] is not None
        assert client.post(f"{API}/reservations/{rid}/finish", headers=staff).json() is None
        assert client.get(f"{API}/rentals?open_only=true").json() == []
        assert len(client.get(f"{API}/rentals").json()) == 1

        released = client.post(f"{API}/vehicles/{vehicle['id']}/release", headers=staff)
        assert released.json()["status"] == "AVAILABLE"

        rows = client.get(f"{API}/reservations").json()
        assert {r["id"] for r in rows} == {rid, other["id"]}
        assert len(client.get(f"{API}/customers").json()) == 1

    def test_past_booking_rejected(self, client):
        admin = login(client, "admin", "admin123")
        vehicle = client.post(f"{API}/vehicles", headers=admin, json={
            "plate": "AA 2", "brand": "Fiat", "model": "Egea", "daily_rate": 50}).json()
        past = date.today() - timedelta(days=2)
        resp = client.post(f"{API}/reservations/book", headers=admin, json={
            "full_name": "X", "license_no": "L", "vehicle_id": vehicle["id"],
            "start_date": past.isoformat(), "end_date": date.today().isoformat(),
        })
        assert resp.status_code == 422


class TestHealth:
    def test_database_ok(self, client):
        assert client.get(f"{API}/health").json()["database"] == "ok"
