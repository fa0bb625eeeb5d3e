"""Tenant (company) model definition."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Boolean, DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base


class Tenant(Base):
    """A company account; the unit of billing and data isolation."""

    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    # Per-tenant grants layered on top of the plan, e.g. {"invoices": true}
    feature_flags: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    # Comped companies get the top tier whatever their subscription says
    lifetime_access: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Tenant {self.id} name={self.name!r}>"
