from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class AuditActor(BaseModel):
    id: Optional[str] = None
    email: Optional[str] = None


class AuditEntity(BaseModel):
    type: str
    id: Optional[str] = None


class AuditEventOut(BaseModel):
    id: str
    time: datetime
    type: str
    actor: AuditActor
    entity: AuditEntity
    message: str
    meta: Dict[str, Any] = Field(default_factory=dict)
