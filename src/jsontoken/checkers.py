"""Policy checkers run after signature and time validation.

A checker raises to reject a token: an ``InvalidTokenError`` subclass
(usually ``PolicyError``) keeps its kind, a ``CheckerError`` is reported
as ``UNKNOWN``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .errors import PolicyError

if TYPE_CHECKING:
    from .models import JsonToken


@runtime_checkable
class Checker(Protocol):
    """Pure policy predicate over a verified token."""

    def check(self, token: JsonToken) -> None:
        """Raise if ``token`` violates this policy."""
        ...


class AudienceChecker:
    """Requires the ``aud`` claim to name one of the expected audiences."""

    def __init__(self, *audiences: str) -> None:
        if not audiences:
            msg = "At least one expected audience is required"
            raise ValueError(msg)
        self.audiences = frozenset(audiences)

    def check(self, token: JsonToken) -> None:
        audience = token.audience
        if audience is None:
            raise PolicyError("Token has no audience")

        presented = {audience} if isinstance(audience, str) else set(audience)
        if presented.isdisjoint(self.audiences):
            raise PolicyError(
                "Token audience does not match",
                details={"audience": audience},
            )


class IgnoreAudience:
    """Accepts every token."""

    def check(self, token: JsonToken) -> None:
        return None
