"""Unit tests for the identity & role context."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from app.models.user import User
from app.services.auth_service import AuthContext, create_user
from app.exceptions import AuthorizationError, ConflictError, ValidationError


class TestLogin:
    def test_valid_credentials_set_role(self, db):
        ctx = AuthContext()
        assert ctx.login(db, "staff", "staff123") is True
        assert ctx.role == "STAFF"
        assert ctx.username == "staff"

    def test_wrong_password_keeps_previous_role(self, db):
        ctx = AuthContext()
        ctx.login(db, "admin", "admin123")
        assert ctx.login(db, "staff", "nope") is False
        assert ctx.role == "ADMIN"
        assert ctx.username == "admin"

    def test_unknown_user_fails(self, db):
        ctx = AuthContext()
        assert ctx.login(db, "ghost", "x") is False
        assert not ctx.is_logged_in

    def test_logout_clears_role(self, db):
        ctx = AuthContext()
        ctx.login(db, "admin", "admin123")
        ctx.logout()
        with pytest.raises(AuthorizationError):
            ctx.require_login()

    def test_contexts_are_independent(self, db):
        a, b = AuthContext(), AuthContext()
        a.login(db, "admin", "admin123")
        assert b.role is None


class TestGuards:
    def test_require_login(self, anonymous, staff):
        with pytest.raises(AuthorizationError):
            anonymous.require_login()
        staff.require_login()

    def test_require_admin(self, admin, staff, anonymous):
        admin.require_admin()
        for ctx in (staff, anonymous):
            with pytest.raises(AuthorizationError):
                ctx.require_admin()

    def test_require_staff(self, admin, staff):
        staff.require_staff()
        with pytest.raises(AuthorizationError):
            admin.require_staff()

    def test_is_admin(self, admin, staff):
        assert admin.is_admin
        assert not staff.is_admin


class TestCreateUser:
    def test_admin_creates_staff(self, db, admin):
        user = create_user(admin, db, "clerk", "pw", "STAFF")
        assert user.id is not None
        assert AuthContext().login(db, "clerk", "pw")

    def test_staff_cannot_create(self, db, staff):
        with pytest.raises(AuthorizationError):
            create_user(staff, db, "clerk", "pw", "STAFF")
        assert db.query(User).filter(User.username == "clerk").first() is None

    def test_unknown_role(self, db, admin):
        with pytest.raises(ValidationError):
            create_user(admin, db, "clerk", "pw", "MANAGER")

    def test_duplicate_username(self, db, admin):
        with pytest.raises(ConflictError):
            create_user(admin, db, "staff", "pw", "STAFF")
