"""Error classes for jsontoken.

Implements the token error taxonomy: a closed set of validity kinds that
tell callers "this token is invalid", kept apart from the usage errors
that tell them "your integration is broken".
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for jsontoken."""

    # Token validity (1xxx)
    MALFORMED_TOKEN_STRING = "TOKEN_1001"
    UNSUPPORTED_ALGORITHM = "TOKEN_1002"
    NO_VERIFIER = "TOKEN_1003"
    BAD_SIGNATURE = "TOKEN_1004"
    BAD_TIME_RANGE = "TOKEN_1005"
    POLICY_FAILURE = "TOKEN_1006"
    UNKNOWN = "TOKEN_1099"

    # Caller misuse (2xxx)
    ILLEGAL_STATE = "USAGE_2001"
    MISSING_SIGNATURE = "USAGE_2002"

    # Collaborator failures (3xxx)
    SIGNING_FAILED = "COLLAB_3001"
    SIGNATURE_REJECTED = "COLLAB_3002"
    LOOKUP_FAILED = "COLLAB_3003"
    CHECK_FAILED = "COLLAB_3004"


class JsonTokenError(Exception):
    """Base error for jsontoken with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if isinstance(code, str) else code.value
        self.details = details or {}
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
            "cause": repr(self.__cause__) if self.__cause__ is not None else None,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidTokenError(JsonTokenError):
    """Token failed validation.

    Carries one of the token validity codes. A bare instance is the
    ``UNKNOWN`` kind: a collaborator rejected the token without saying why.
    """

    def __init__(
        self,
        message: str = "Token is invalid",
        code: ErrorCode = ErrorCode.UNKNOWN,
        *,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, code, details=details, cause=cause)

    @property
    def error_code(self) -> ErrorCode:
        """The validity kind as an enum member."""
        return ErrorCode(self.code)


class MalformedTokenError(InvalidTokenError):
    """Token string failed structural decode."""

    def __init__(
        self,
        message: str = "Malformed token string",
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.MALFORMED_TOKEN_STRING, cause=cause)


class UnsupportedAlgorithmError(InvalidTokenError):
    """Header names an unknown or unconfigured signature algorithm."""

    def __init__(
        self,
        message: str = "Unsupported signature algorithm",
        *,
        algorithm: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.UNSUPPORTED_ALGORITHM,
            details={"algorithm": algorithm} if algorithm else None,
        )
        self.algorithm = algorithm


class NoVerifierError(InvalidTokenError):
    """Discovery yielded no verifier for the token's issuer and key id."""

    def __init__(
        self,
        message: str = "No verifier available",
        *,
        issuer: str | None = None,
        key_id: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.NO_VERIFIER,
            details={"issuer": issuer, "key_id": key_id},
        )
        self.issuer = issuer
        self.key_id = key_id


class BadSignatureError(InvalidTokenError):
    """Every candidate verifier rejected the signature."""

    def __init__(
        self,
        message: str = "Signature verification failed",
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.BAD_SIGNATURE, cause=cause)


class PolicyError(InvalidTokenError):
    """The token violates a known policy (checker or time window)."""

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.POLICY_FAILURE,
    ) -> None:
        super().__init__(message, code, details=details)


class TokenTimeRangeError(PolicyError):
    """Issued-at or expiration is outside the accepted window.

    A policy failure with its own ``BAD_TIME_RANGE`` code.
    """

    def __init__(
        self,
        message: str = "Invalid iat and/or exp",
        *,
        issued_at: int | None = None,
        expiration: int | None = None,
    ) -> None:
        super().__init__(
            message,
            details={"iat": issued_at, "exp": expiration},
            code=ErrorCode.BAD_TIME_RANGE,
        )


class TokenUsageError(JsonTokenError):
    """The API was misused; the token should never have reached this call."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ILLEGAL_STATE,
    ) -> None:
        super().__init__(message, code)


class MissingSignatureError(TokenUsageError):
    """Token string carries no signature segment."""

    def __init__(self, message: str = "Token string has no signature") -> None:
        super().__init__(message, ErrorCode.MISSING_SIGNATURE)


class SigningError(JsonTokenError):
    """Token cannot be signed."""

    def __init__(
        self,
        message: str = "Token cannot be signed",
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.SIGNING_FAILED, cause=cause)


class SignatureError(JsonTokenError):
    """A verifier rejected a signature."""

    def __init__(
        self,
        message: str = "Signature rejected",
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.SIGNATURE_REJECTED, cause=cause)


class VerifierLookupError(JsonTokenError):
    """A verifier provider failed to produce candidates."""

    def __init__(
        self,
        message: str = "Verifier lookup failed",
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.LOOKUP_FAILED, cause=cause)


class CheckerError(JsonTokenError):
    """A checker rejected the token without a specific validity kind."""

    def __init__(
        self,
        message: str = "Token rejected by checker",
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CHECK_FAILED, details=details)
