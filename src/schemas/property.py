"""Pydantic schemas for Property resources"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PropertyCreate(BaseModel):
    """Schema for creating a property."""

    address: str = Field(..., min_length=1, description="Street address")
    city: Optional[str] = Field(default=None, description="City or area name")
    bedrooms: Optional[int] = Field(default=None, ge=0, description="Bedroom count")
    monthly_rent_cents: Optional[int] = Field(
        default=None, ge=0, description="Asking rent in cents"
    )


class PropertyRead(BaseModel):
    """Schema returned when reading a property."""

    id: UUID = Field(..., description="Property identifier")
    tenant_id: UUID = Field(..., description="Owning company identifier")
    address: str = Field(..., description="Street address")
    city: Optional[str] = Field(default=None, description="City or area name")
    bedrooms: Optional[int] = Field(default=None, description="Bedroom count")
    monthly_rent_cents: Optional[int] = Field(default=None, description="Asking rent in cents")
    status: str = Field(..., description="Listing status")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)
