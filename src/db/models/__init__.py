"""Database models package exports."""

from src.db.models.property import Property
from src.db.models.social_account import SocialAccount
from src.db.models.subscription import Subscription
from src.db.models.tenant import Tenant
from src.db.models.user import User

__all__ = [
    "Property",
    "SocialAccount",
    "Subscription",
    "Tenant",
    "User",
]
