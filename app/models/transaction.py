# app/models/transaction.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    type = Column(String(length=20), nullable=False)  # e.g. income, expense
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String(length=255), nullable=True)
    date = Column(DateTime, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="transactions")
    account = relationship("Account", back_populates="transactions", lazy="joined")
    category = relationship("Category", back_populates="transactions", lazy="joined")

    def __repr__(self):
        return f"<Transaction amount={self.amount} date={self.date} user_id={self.user_id}>"
