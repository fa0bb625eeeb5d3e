"""Repository layer package."""

from src.repositories.property_repo import PropertyRepo
from src.repositories.social_account_repo import SocialAccountRepo
from src.repositories.subscription_repo import SubscriptionRepo
from src.repositories.tenant_repo import TenantRepo
from src.repositories.usage_repo import UsageRepo
from src.repositories.user_repo import UserRepo

__all__ = [
    "PropertyRepo",
    "SocialAccountRepo",
    "SubscriptionRepo",
    "TenantRepo",
    "UsageRepo",
    "UserRepo",
]
