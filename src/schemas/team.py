"""Pydantic schemas for team membership"""
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class TeamMemberCreate(BaseModel):
    """Schema for adding a member to the caller's company."""

    email: EmailStr = Field(..., description="Member e-mail address")
    full_name: Optional[str] = Field(default=None, description="Display name")
    role: Literal["admin", "member"] = Field(default="member", description="Company role")


class TeamMemberRead(BaseModel):
    """Schema returned when reading a team member."""

    id: UUID = Field(..., description="User identifier")
    email: str = Field(..., description="Member e-mail address")
    full_name: Optional[str] = Field(default=None, description="Display name")
    role: str = Field(..., description="Company role")

    model_config = ConfigDict(from_attributes=True)
