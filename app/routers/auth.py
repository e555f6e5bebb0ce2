"""
Login / logout and the per-token session registry.

POST /auth/login returns a token; clients send it back as X-Session-Token.
Each token maps to its own AuthContext, held in memory for the life of the
process. A user holds one token at a time: logging in again drops the older
token. A request without a valid token gets an empty context, so service
guards reject anything that needs a role.
"""

import secrets
from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.auth import LoginRequest, LoginResponse, SessionOut, UserCreate, UserOut
from app.services.auth_service import AuthContext, create_user

router = APIRouter()

_sessions: dict = {}


def get_auth(x_session_token: Optional[str] = Header(default=None)) -> AuthContext:
    """FastAPI dependency: the caller's AuthContext (empty if not logged in)."""
    if x_session_token and x_session_token in _sessions:
        return _sessions[x_session_token]
    return AuthContext()


@router.post("/auth/login", response_model=LoginResponse, summary="Log in and receive a session token")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    ctx = AuthContext()
    if not ctx.login(db, body.username, body.password):
        raise HTTPException(status_code=401, detail="Invalid username or password")
    for old in [t for t, c in _sessions.items() if c.username == ctx.username]:
        _sessions.pop(old).logout()
    token = secrets.token_urlsafe(32)
    _sessions[token] = ctx
    return LoginResponse(token=token, username=ctx.username, role=ctx.role)


@router.post("/auth/logout", summary="End the session")
def logout(x_session_token: Optional[str] = Header(default=None)):
    ctx = _sessions.pop(x_session_token, None) if x_session_token else None
    if ctx:
        ctx.logout()
    return {"status": "logged_out"}


@router.get("/auth/me", response_model=SessionOut, summary="Current session")
def me(ctx: AuthContext = Depends(get_auth)):
    return SessionOut(username=ctx.username, role=ctx.role)


@router.post("/users", response_model=UserOut, summary="Create a staff/admin account (ADMIN)")
def add_user(body: UserCreate, ctx: AuthContext = Depends(get_auth), db: Session = Depends(get_db)):
    return create_user(ctx, db, body.username, body.password, body.role)
