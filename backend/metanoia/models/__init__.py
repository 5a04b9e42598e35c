"""SQLAlchemy ORM models for Metanoia.

All models are exported from this module for convenient imports:
    from metanoia.models import User, Profile, Match, ...

Models are organized by domain:
- user.py: User (auth, role, onboarding status)
- preferences.py: UserPreferences
- onboarding.py: OnboardingSession (in-progress wizard answers)
- profile.py: Profile (published onboarding result)
- swipe.py: Swipe, Match
- chat.py: ChatMessage
- referral.py: Referral
"""

from metanoia.models.base import Base, CreatedAtMixin, TimestampMixin
from metanoia.models.chat import ChatMessage
from metanoia.models.onboarding import OnboardingSession
from metanoia.models.preferences import UserPreferences
from metanoia.models.profile import Profile
from metanoia.models.referral import Referral
from metanoia.models.swipe import Match, Swipe
from metanoia.models.user import User

__all__ = [
    "Base",
    "ChatMessage",
    "CreatedAtMixin",
    "Match",
    "OnboardingSession",
    "Profile",
    "Referral",
    "Swipe",
    "TimestampMixin",
    "User",
    "UserPreferences",
]
