# app/schemas/account.py
from typing import Optional
from datetime import datetime
from pydantic import Field
import uuid

from app.schemas.base import CamelModel

class AccountCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100, description="E.g. Wallet")
    type: str = Field(..., min_length=1, max_length=50, description="E.g. checking, cash")

class AccountUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[str] = Field(None, min_length=1, max_length=50)

class AccountRead(CamelModel):
    id: int
    name: str
    type: str
    user_id: uuid.UUID
    created_at: Optional[datetime] = None
