# app/schemas/user.py
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
import uuid

from app.schemas.base import CamelModel

# Public fields returned on GET /user/profile
class UserRead(CamelModel):
    id: uuid.UUID
    external_id: Optional[str] = None
    email: str
    name: Optional[str] = None
    currency: Optional[str] = None
    email_verified: bool = False
    role: str = "user"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

# Fields accepted on PUT /user/profile
class UserProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, max_length=255)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)

# Body of POST /auth/sync; every field is optional, claims fill the gaps
class UserSyncRequest(CamelModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None

    def display_name(self) -> Optional[str]:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.name or None

class SyncedUser(CamelModel):
    id: uuid.UUID
    external_id: Optional[str] = None
    email: str
    name: Optional[str] = None

class UserSyncResponse(BaseModel):
    success: bool = True
    user: SyncedUser
