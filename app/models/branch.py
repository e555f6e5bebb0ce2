"""
Rental branches. Every vehicle has a home branch, which is used as the
pickup and drop-off branch when a rental starts.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from app.database import Base


class Branch(Base):
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), unique=True, nullable=False)
    city = Column(String(120))

    vehicles = relationship("Vehicle", back_populates="branch")

    def __repr__(self):
        return f"<Branch {self.id} {self.name}>"
