"""Data models for flaguser."""

from .country_code import CountryCode
from .user_profile import UserProfile, UserProfileBuilder

__all__ = [
    'CountryCode',
    'UserProfile',
    'UserProfileBuilder',
]
