"""Intervention and reclamation records.

Provides the ORM models, request/response schemas, the record store,
the read-only user directory and the daily rate limiter.
"""

from .directory import AuthUser, SqlUserDirectory, UserAccount, UserDirectory
from .models import RECORD_MODELS, Intervention, Reclamation, RecordKind, utcnow
from .rate_limit import RateLimiter
from .store import RecordStore, UserActivity

__all__ = [
    "AuthUser",
    "Intervention",
    "RECORD_MODELS",
    "RateLimiter",
    "Reclamation",
    "RecordKind",
    "RecordStore",
    "SqlUserDirectory",
    "UserAccount",
    "UserActivity",
    "UserDirectory",
    "utcnow",
]
