"""
Identity & role context.

An AuthContext is created per desktop session / API token and passed to every
mutating service call. Guards raise AuthorizationError before any storage
access happens.
"""

from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.models.user import User
from app.models.enums import Role
from app.exceptions import AuthorizationError, ConflictError, ValidationError
from app.utils.logger import get_logger

logger = get_logger(__name__)


class AuthContext:
    """Holds at most one active role (ADMIN, STAFF or none)."""

    def __init__(self, role: Optional[str] = None, username: Optional[str] = None):
        self.role = role
        self.username = username

    def login(self, db: Session, username: str, password: str) -> bool:
        """Look up the credentials. A failed attempt leaves the previous role in place."""
        user = (
            db.query(User)
            .filter(User.username == username, User.password == password)
            .first()
        )
        if user is None:
            logger.warning(f"Login failed for '{username}'")
            return False

        self.role = user.role
        self.username = user.username
        logger.info(f"Login: {username} as {user.role}")
        return True

    def logout(self):
        logger.info(f"Logout: {self.username}")
        self.role = None
        self.username = None

    @property
    def is_logged_in(self) -> bool:
        return self.role is not None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def require_login(self):
        if self.role is None:
            raise AuthorizationError("You must log in first")

    def require_admin(self):
        if self.role != Role.ADMIN.value:
            raise AuthorizationError("This operation requires the ADMIN role")

    def require_staff(self):
        if self.role != Role.STAFF.value:
            raise AuthorizationError("This operation requires the STAFF role")

    def __repr__(self):
        return f"<AuthContext user={self.username} role={self.role}>"


def create_user(ctx: AuthContext, db: Session, username: str, password: str, role: str) -> User:
    """Provision a staff or admin account (ADMIN only)."""
    ctx.require_admin()
    if role not in {r.value for r in Role}:
        raise ValidationError(f"Unknown role '{role}'")
    if not username or not password:
        raise ValidationError("Username and password are required")

    user = User(username=username, password=password, role=role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"User '{username}' already exists")
    db.refresh(user)
    logger.info(f"User created: {username} ({role}) by {ctx.username}")
    return user
