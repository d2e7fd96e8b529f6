"""Data models"""
from .base import BaseModel, UTCDateTime, utc_now
from .account import Account
from .question import Question

__all__ = [
    "BaseModel",
    "UTCDateTime",
    "utc_now",
    "Account",
    "Question",
]
