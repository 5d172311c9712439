"""Core components for jsontoken.

Verification logic shared between the sync and async parsers.
``VerificationCore`` lives in ``jsontoken.core.verification`` and is
imported from there, since it depends on the codec.
"""

from __future__ import annotations

from .errors import ErrorFactory
from .time_validator import TimeValidator

__all__ = [
    "ErrorFactory",
    "TimeValidator",
]
