"""Subscription model holding a tenant's plan state."""
from __future__ import annotations

import datetime as dt
import uuid
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, String, func
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base


SUBSCRIPTION_STATUSES = ("trialing", "active", "past_due", "cancelled", "none")


class Subscription(Base):
    """
    Billing-derived plan assignment plus an optional administrator override.

    Rows are never deleted; cancellation only transitions ``status`` and keeps
    ``assigned_plan_id`` so the previous plan stays known.
    """

    __tablename__ = "subscriptions"

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("tenants.id"), primary_key=True
    )
    assigned_plan_id: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="none")
    billing_cycle: Mapped[str] = mapped_column(String, nullable=False, default="monthly")
    current_period_start: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    current_period_end: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)

    override_plan_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    override_reason: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    override_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        PGUUID(as_uuid=True), nullable=True
    )
    override_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return (
            f"<Subscription tenant={self.tenant_id} plan={self.assigned_plan_id} "
            f"override={self.override_plan_id} status={self.status}>"
        )
