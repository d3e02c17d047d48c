from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field


class ProcedureCall(BaseModel):
    args: Dict[str, Any] = Field(default_factory=dict)


class ProcedureResult(BaseModel):
    value: Any = None


# ---------- Procedure arguments ----------

class NoArgs(BaseModel):
    pass


class CreatePortalComplaintArgs(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category_id: str
    location: str = Field(..., min_length=1)
    attachment_id: Optional[str] = None
    attachment_name: Optional[str] = None


class AddResponseArgs(BaseModel):
    complaint_id: str
    message: str = Field(..., min_length=1)
    attachment_id: Optional[str] = None


class AttachmentUrlArgs(BaseModel):
    storage_id: str


class AddCategoryArgs(BaseModel):
    name: str = Field(..., min_length=2)
    description: str = ""


class AddOfficialArgs(BaseModel):
    email: EmailStr
    category_id: str
    title: str = Field(..., min_length=1)
