from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from citizen_portal.schemas.complaint import ComplaintOut


# -------------------------
# Requests (INPUT)
# -------------------------

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    phone: Optional[str] = Field(default=None, description="E.164 or local format")
    address: Optional[str] = None


class LoginRequest(BaseModel):
    # any string; an unknown or malformed email is just bad credentials
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# -------------------------
# Responses (OUTPUT)
# -------------------------

class CitizenOut(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None


class CitizenProfileOut(CitizenOut):
    complaints: List[ComplaintOut] = Field(default_factory=list)


class LoginResponse(BaseModel):
    citizen: CitizenOut
    token: str
