"""Pydantic schemas for plan administration"""
from typing import Optional

from pydantic import BaseModel, Field


class PlanOverrideRequest(BaseModel):
    """Body for setting (or clearing, with ``plan: null``) a plan override."""

    plan: Optional[str] = Field(default=None, description="Plan id or alias; null clears")
    reason: Optional[str] = Field(default=None, description="Audit note")
