"""
Staff accounts. Role decides which operations a session may run.
Passwords are compared as stored; hashing is not part of this system.
"""

from sqlalchemy import Column, Integer, String
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password = Column(String(200), nullable=False)
    role = Column(String(20), nullable=False)  # ADMIN | STAFF

    def __repr__(self):
        return f"<User {self.username} role={self.role}>"
