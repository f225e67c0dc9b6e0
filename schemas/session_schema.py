from datetime import datetime

from pydantic import BaseModel


class SessionRecord(BaseModel):
    token: str
    user_id: int
    username: str
    created_at: datetime | None = None
    expires_at: datetime

    model_config = {"frozen": True}
