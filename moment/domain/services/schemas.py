"""Service listing schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    providerId: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=0, description="Duration in minutes")
    images: Optional[list[str]] = None
    available: Optional[bool] = None


class ServiceUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=0)
    available: Optional[bool] = None
