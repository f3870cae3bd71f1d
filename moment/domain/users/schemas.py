"""User domain schemas - Pydantic models for validation"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

Role = Literal["user", "provider", "admin"]


class UserUpdate(BaseModel):
    """Partial profile update; unknown keys are stored as-is"""

    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    role: Optional[Role] = None
