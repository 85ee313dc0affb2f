from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AuditEntryOut(BaseModel):
    id: int
    challenge_id: int
    actor: str
    action: str
    from_state: Optional[str] = None
    to_state: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
