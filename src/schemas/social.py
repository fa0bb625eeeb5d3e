"""Pydantic schemas for connected social platforms"""
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


SocialPlatform = Literal["facebook", "instagram", "linkedin", "x", "tiktok", "youtube"]


class SocialAccountCreate(BaseModel):
    """Schema for connecting a platform account."""

    platform: SocialPlatform = Field(..., description="Platform name")
    handle: str = Field(..., min_length=1, description="Account handle on the platform")


class SocialAccountRead(BaseModel):
    """Schema returned when reading a connected account."""

    id: UUID = Field(..., description="Connection identifier")
    platform: str = Field(..., description="Platform name")
    handle: str = Field(..., description="Account handle on the platform")
    status: str = Field(..., description="active or disconnected")
    created_at: Optional[datetime] = Field(default=None, description="Connection timestamp")

    model_config = ConfigDict(from_attributes=True)
