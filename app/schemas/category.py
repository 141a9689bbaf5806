# app/schemas/category.py
from typing import Optional
from datetime import datetime
from pydantic import Field
import uuid

from app.schemas.base import CamelModel

class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=32)
    color: Optional[str] = Field(None, max_length=16)

class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=32)
    color: Optional[str] = Field(None, max_length=16)

class CategoryRead(CamelModel):
    id: int
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None
    user_id: Optional[uuid.UUID] = None
    is_global: bool = False
    created_at: Optional[datetime] = None
