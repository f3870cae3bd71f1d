"""Provider domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProviderCreate(BaseModel):
    """Schema for creating a provider profile; uid comes from the token"""

    model_config = ConfigDict(extra="allow")

    businessName: str
    category: str = "other"
    description: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    priceRange: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None
    images: Optional[list[str]] = None
    features: Optional[list[str]] = None


class ProviderUpdate(BaseModel):
    """Partial update; any field may be sent"""

    model_config = ConfigDict(extra="allow")

    businessName: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    images: Optional[list[str]] = None
    features: Optional[list[str]] = None


class ProviderStatusUpdate(BaseModel):
    status: str


class ProviderPublishUpdate(BaseModel):
    published: bool
