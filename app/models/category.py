# app/models/category.py
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Union
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base


@dataclass(frozen=True)
class GlobalOwnership:
    """Shared category, read-only to every user"""

    def is_mutable_by(self, user_id: uuid.UUID) -> bool:
        return False


@dataclass(frozen=True)
class OwnedBy:
    user_id: uuid.UUID

    def is_mutable_by(self, user_id: uuid.UUID) -> bool:
        return self.user_id == user_id


CategoryOwnership = Union[GlobalOwnership, OwnedBy]


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # NULL marks a global category
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(length=100), nullable=False)
    icon = Column(String(length=32), nullable=True)
    color = Column(String(length=16), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="categories")
    transactions = relationship("Transaction", back_populates="category", passive_deletes=True)

    @property
    def ownership(self) -> CategoryOwnership:
        if self.user_id is None:
            return GlobalOwnership()
        return OwnedBy(self.user_id)

    @property
    def is_global(self) -> bool:
        return isinstance(self.ownership, GlobalOwnership)

    def is_mutable_by(self, user_id: uuid.UUID) -> bool:
        return self.ownership.is_mutable_by(user_id)

    def __repr__(self):
        return f"<Category name={self.name} user_id={self.user_id}>"
