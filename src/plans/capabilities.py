"""Identity-based capabilities that sit above plan resolution."""
from __future__ import annotations

from typing import Iterable, Optional, Protocol

from src.core.config import settings


class Caller(Protocol):
    email: str
    is_super_admin: bool
    is_partner: bool


def is_super_admin(caller: Optional[Caller], admin_emails: Optional[Iterable[str]] = None) -> bool:
    if caller is None:
        return False
    if caller.is_super_admin:
        return True
    emails = settings.SUPER_ADMIN_EMAILS if admin_emails is None else admin_emails
    return (caller.email or "").lower() in {email.lower() for email in emails}


def has_full_access(caller: Optional[Caller], admin_emails: Optional[Iterable[str]] = None) -> bool:
    """
    Super-administrators and partner accounts bypass every plan check.

    This is an attribute of who is calling, so it is evaluated before the
    tenant's plan is resolved and is never expressed as a catalog plan.
    """
    if caller is None:
        return False
    return is_super_admin(caller, admin_emails) or bool(caller.is_partner)
