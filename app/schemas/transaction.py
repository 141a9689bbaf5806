# app/schemas/transaction.py
from typing import Optional
from datetime import datetime, timezone
from decimal import Decimal
from pydantic import Field, field_validator
import uuid

from app.schemas.base import CamelModel
from app.schemas.account import AccountRead
from app.schemas.category import CategoryRead

def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored dates are naive UTC; offset-aware input is converted first"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

class TransactionCreate(CamelModel):
    type: str = Field(..., min_length=1, max_length=20, description="E.g. income, expense")
    category: str = Field(..., min_length=1, max_length=100, description="Category name, created if missing")
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)
    description: Optional[str] = Field(None, max_length=255)
    date: datetime = Field(..., description="ISO 8601 date/time of transaction")
    account_id: int

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

class TransactionUpdate(CamelModel):
    type: Optional[str] = Field(None, min_length=1, max_length=20)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    description: Optional[str] = Field(None, max_length=255)
    date: Optional[datetime] = None
    account_id: Optional[int] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

class TransactionRead(CamelModel):
    id: int
    type: str
    amount: Decimal
    description: Optional[str] = None
    date: datetime
    account_id: int
    category_id: Optional[int] = None
    user_id: uuid.UUID
    account: Optional[AccountRead] = None
    category: Optional[CategoryRead] = None
    created_at: Optional[datetime] = None
