"""Centralized error classification for jsontoken.

Decides which failures become classified ``InvalidTokenError`` kinds and
which are programming errors that must reach the caller unchanged.
"""

from __future__ import annotations

from ..errors import (
    ErrorCode,
    InvalidTokenError,
    JsonTokenError,
    MalformedTokenError,
    TokenUsageError,
)


class ErrorFactory:
    """Consistent error creation shared by the sync and async parsers."""

    @staticmethod
    def classify(exc: BaseException) -> InvalidTokenError | None:
        """Map a failure onto the token validity taxonomy.

        Args:
            exc: Failure raised by a verification stage or collaborator.

        Returns:
            The classified error, or None if ``exc`` must be re-raised as is.
        """
        if isinstance(exc, InvalidTokenError):
            return exc

        if isinstance(exc, TokenUsageError):
            return None

        if isinstance(exc, JsonTokenError):
            return InvalidTokenError(
                exc.message,
                ErrorCode.UNKNOWN,
                details={"source_code": exc.code},
                cause=exc,
            )

        return None

    @staticmethod
    def reraise_classified(exc: BaseException) -> None:
        """Raise the classified form of ``exc``, or ``exc`` itself."""
        classified = ErrorFactory.classify(exc)
        if classified is None or classified is exc:
            raise exc
        raise classified from exc

    @staticmethod
    def malformed(message: str, cause: BaseException | None = None) -> MalformedTokenError:
        """Create a malformed token error preserving the decode failure."""
        return MalformedTokenError(message, cause=cause)
