# app/schemas/auth.py
from pydantic import BaseModel
from typing import Optional


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str
    username: str
    role: str


class SessionOut(BaseModel):
    username: Optional[str]
    role: Optional[str]


class UserCreate(BaseModel):
    username: str
    password: str
    role: str        # ADMIN | STAFF


class UserOut(BaseModel):
    id: int
    username: str
    role: str

    class Config:
        from_attributes = True
