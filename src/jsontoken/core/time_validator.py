"""Issued-at and expiration validation with symmetric clock skew."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from ..errors import TokenTimeRangeError
from ..models import EXPIRATION, ISSUED_AT

if TYPE_CHECKING:
    from ..clock import Clock
    from ..models import JsonToken


class TimeValidator:
    """Checks a token's time claims against a clock.

    The skew is applied to each bound independently: a token is accepted up
    to ``skew`` before its issued-at and up to ``skew`` after its expiration.
    An absent bound imposes no constraint.
    """

    def __init__(self, clock: Clock, skew: timedelta) -> None:
        self.clock = clock
        self.skew = skew

    def issued_at_is_valid(self, token: JsonToken, now: datetime) -> bool:
        issued_at = token.issued_at
        return issued_at is None or issued_at <= now + self.skew

    def expiration_is_valid(self, token: JsonToken, now: datetime) -> bool:
        expiration = token.expiration
        return expiration is None or expiration >= now - self.skew

    def validate(self, token: JsonToken) -> None:
        """Check both bounds against the clock's current time.

        Raises:
            TokenTimeRangeError: If either bound fails or the range is inverted.
        """
        issued_at = token.get_param(ISSUED_AT)
        expiration = token.get_param(EXPIRATION)

        if issued_at is not None and expiration is not None and issued_at > expiration:
            raise TokenTimeRangeError(
                "Token issued-at is after its expiration",
                issued_at=issued_at,
                expiration=expiration,
            )

        now = self.clock.now()
        if not self.issued_at_is_valid(token, now):
            raise TokenTimeRangeError(
                "Token issued-at is in the future",
                issued_at=issued_at,
                expiration=expiration,
            )
        if not self.expiration_is_valid(token, now):
            raise TokenTimeRangeError(
                "Token has expired",
                issued_at=issued_at,
                expiration=expiration,
            )
