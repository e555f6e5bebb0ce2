"""Unit tests for the customer directory."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import patch
from sqlalchemy.exc import IntegrityError
from app.models.customer import Customer
from app.services import customer_service as cs
from app.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError


class TestFindOrCreate:
    def test_same_license_returns_same_id(self, db, staff):
        first = cs.find_or_create_by_license(staff, db, "Ali Yilmaz", "0555", "LIC-9")
        second = cs.find_or_create_by_license(staff, db, "Veli Demir", "0544", "LIC-9")
        assert first == second
        assert db.query(Customer).count() == 1
        assert db.get(Customer, first).full_name == "Ali Yilmaz"

    def test_new_license_creates(self, db, staff, customer):
        new_id = cs.find_or_create_by_license(staff, db, "Ayse Kaya", "0533", "LIC-10")
        assert new_id != customer.id
        assert db.query(Customer).count() == 2

    def test_concurrent_insert_resolves_to_winner(self, db, staff, customer):
        # Lookup misses (the other caller has not committed yet), insert then collides.
        with patch.object(cs, "find_customer_by_license", side_effect=[None, customer]):
            with patch.object(db, "commit", side_effect=IntegrityError("INSERT", {}, Exception("unique"))):
                resolved = cs.find_or_create_by_license(staff, db, "Other Name", "0", customer.license_no)
        assert resolved == customer.id

    def test_requires_login(self, db, anonymous):
        with pytest.raises(AuthorizationError):
            cs.find_or_create_by_license(anonymous, db, "A", "0", "LIC-1")


class TestCrud:
    def test_list_newest_first(self, db, staff):
        a = cs.create_customer(staff, db, "A", "1", "L1")
        b = cs.create_customer(staff, db, "B", "2", "L2")
        assert [c.id for c in cs.list_customers(db)] == [b.id, a.id]

    def test_search_name_or_license(self, db, staff):
        cs.create_customer(staff, db, "Burak Ozen", "1", "TR-123")
        cs.create_customer(staff, db, "Zeynep Ak", "2", "TR-999")
        assert [c.full_name for c in cs.search_customers(db, "burak")] == ["Burak Ozen"]
        assert [c.full_name for c in cs.search_customers(db, "tr-9")] == ["Zeynep Ak"]

    def test_search_wildcards_are_literal(self, db, staff):
        cs.create_customer(staff, db, "Burak Ozen", "1", "TR_123")
        cs.create_customer(staff, db, "Zeynep Ak", "2", "TR-999")
        assert [c.full_name for c in cs.search_customers(db, "tr_")] == ["Burak Ozen"]
        assert cs.search_customers(db, "%") == []

    def test_update(self, db, staff, customer):
        cs.update_customer(staff, db, customer.id, "Ali Y.", "0500", "LIC-0001")
        assert customer.full_name == "Ali Y."
        assert customer.phone == "0500"

    def test_update_missing(self, db, staff):
        with pytest.raises(NotFoundError):
            cs.update_customer(staff, db, 42, "X", "0", "L")

    def test_delete(self, db, staff, customer):
        cs.delete_customer(staff, db, customer.id)
        assert db.query(Customer).count() == 0

    def test_delete_requires_login(self, db, anonymous, customer):
        with pytest.raises(AuthorizationError):
            cs.delete_customer(anonymous, db, customer.id)

    def test_duplicate_license(self, db, staff, customer):
        with pytest.raises(ConflictError):
            cs.create_customer(staff, db, "Someone", "0", customer.license_no)

    def test_blank_license(self, db, staff):
        with pytest.raises(ValidationError):
            cs.create_customer(staff, db, "Someone", "0", "  ")
