"""Account domain schemas - Pydantic models for validation"""

from typing import Literal, Optional

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    uid: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    role: Literal["user", "provider", "admin"] = "user"
    # Provider sign-up extras
    experience: Optional[str] = None
    address: Optional[str] = None
    aadharUrl: Optional[str] = None


class SetAdminRequest(BaseModel):
    adminSecret: Optional[str] = None


class SetClaimsRequest(BaseModel):
    claims: dict[str, bool]
