# app/models/account.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base

class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=100), nullable=False)
    type = Column(String(length=50), nullable=False)  # e.g. checking, savings, cash

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="accounts")
    transactions = relationship("Transaction", back_populates="account", cascade="all, delete")

    def __repr__(self):
        return f"<Account name={self.name} type={self.type} user_id={self.user_id}>"
