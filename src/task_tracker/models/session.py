"""
Session models — the auth backend's token response.
"""

import time
from typing import Any, Optional

from pydantic import BaseModel, model_validator


class User(BaseModel):
    id: str
    email: Optional[str] = None


class Session(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    expires_at: Optional[int] = None  # epoch seconds
    user: User

    @model_validator(mode="before")
    @classmethod
    def _derive_expires_at(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("expires_at") is None and data.get("expires_in") is not None:
            data = {**data, "expires_at": int(time.time()) + int(data["expires_in"])}
        return data

    @property
    def user_id(self) -> str:
        return self.user.id

    def expires_within(self, seconds: float, now: Optional[float] = None) -> bool:
        """True when the token expires within `seconds`. Sessions without expiry never do."""
        if self.expires_at is None:
            return False
        current = time.time() if now is None else now
        return self.expires_at - current <= seconds

    def is_expired(self, now: Optional[float] = None) -> bool:
        return self.expires_within(0, now)
