"""Tokens under construction.

A ``JsonTokenBuilder`` owns a signer and mutable claims until
``serialize_and_sign`` succeeds; afterwards it is frozen and exposes the
signed wire string and the equivalent immutable ``JsonToken``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from . import codec
from .clock import SystemClock
from .errors import SigningError, TokenUsageError
from .models import (
    ALGORITHM_HEADER,
    AUDIENCE,
    EXPIRATION,
    ISSUED_AT,
    ISSUER,
    KEY_ID_HEADER,
    TYPE_HEADER,
    JsonToken,
)
from .telemetry import get_logger

if TYPE_CHECKING:
    from .clock import Clock
    from .crypto import Signer


def _from_seconds(value: int | None) -> datetime | None:
    return None if value is None else datetime.fromtimestamp(value, tz=UTC)


def _to_seconds(value: datetime) -> int:
    if value.tzinfo is None:
        msg = "Token timestamps must be timezone-aware"
        raise ValueError(msg)
    return int(value.timestamp())


class JsonTokenBuilder:
    """Builds and signs a token with the signer's identity."""

    def __init__(self, signer: Signer, *, clock: Clock | None = None) -> None:
        """Initialize builder.

        Args:
            signer: Signing capability; its issuer becomes the ``iss`` claim.
            clock: Clock used by ``issue_now`` (defaults to system time).
        """
        self._signer = signer
        self._clock = clock or SystemClock()
        self._token_type: str | None = None
        self._payload: dict[str, Any] = {}
        self._token_string: str | None = None
        self._logger = get_logger()

        if signer.issuer is not None:
            self._payload[ISSUER] = signer.issuer

    @property
    def signer(self) -> Signer:
        return self._signer

    @property
    def is_signed(self) -> bool:
        return self._token_string is not None

    @property
    def token_string(self) -> str | None:
        """Signed wire string, or None until ``serialize_and_sign`` succeeds."""
        return self._token_string

    def _ensure_mutable(self) -> None:
        if self._token_string is not None:
            raise TokenUsageError("Token has already been signed and cannot be modified")

    def _set_claim(self, name: str, value: Any) -> None:
        self._ensure_mutable()
        if value is None:
            self._payload.pop(name, None)
        else:
            self._payload[name] = value

    @property
    def issuer(self) -> str | None:
        return self._payload.get(ISSUER)

    @issuer.setter
    def issuer(self, value: str | None) -> None:
        self._set_claim(ISSUER, value)

    @property
    def audience(self) -> str | list[str] | None:
        return self._payload.get(AUDIENCE)

    @audience.setter
    def audience(self, value: str | list[str] | None) -> None:
        self._set_claim(AUDIENCE, value)

    @property
    def issued_at(self) -> datetime | None:
        return _from_seconds(self._payload.get(ISSUED_AT))

    @issued_at.setter
    def issued_at(self, value: datetime | None) -> None:
        self._set_claim(ISSUED_AT, None if value is None else _to_seconds(value))

    @property
    def expiration(self) -> datetime | None:
        return _from_seconds(self._payload.get(EXPIRATION))

    @expiration.setter
    def expiration(self, value: datetime | None) -> None:
        self._set_claim(EXPIRATION, None if value is None else _to_seconds(value))

    @property
    def token_type(self) -> str | None:
        return self._token_type

    @token_type.setter
    def token_type(self, value: str | None) -> None:
        self._ensure_mutable()
        self._token_type = value

    def issue_now(self) -> JsonTokenBuilder:
        """Set issued-at to the clock's current time."""
        self.issued_at = self._clock.now()
        return self

    def set_param(self, name: str, value: Any) -> JsonTokenBuilder:
        """Set an application claim; ``None`` removes it."""
        self._set_claim(name, value)
        return self

    def get_param(self, name: str, default: Any = None) -> Any:
        return self._payload.get(name, default)

    def header(self) -> dict[str, Any]:
        """Header derived from the signer's algorithm and key id."""
        header: dict[str, Any] = {ALGORITHM_HEADER: self._signer.signature_algorithm.value}
        if self._signer.key_id is not None:
            header[KEY_ID_HEADER] = self._signer.key_id
        if self._token_type is not None:
            header[TYPE_HEADER] = self._token_type
        return header

    def payload(self) -> dict[str, Any]:
        return dict(self._payload)

    def serialize_and_sign(self) -> str:
        """Sign the token and return its compact string.

        Returns:
            ``base64url(header).base64url(payload).base64url(signature)``.

        Raises:
            TokenUsageError: If the token was already signed.
            SigningError: If the signer fails.
        """
        self._ensure_mutable()
        signing_input = codec.signing_input_for(self.header(), self._payload)
        try:
            signature = self._signer.sign(signing_input.encode("ascii"))
        except SigningError:
            raise
        except Exception as e:
            raise SigningError(f"Signer failed: {e}", cause=e) from e

        self._token_string = f"{signing_input}{codec.SEPARATOR}{codec.encode_bytes(signature)}"
        self._logger.debug(
            "token_signed",
            alg=self._signer.signature_algorithm.value,
            kid=self._signer.key_id,
            iss=self.issuer,
        )
        return self._token_string

    def to_token(self) -> JsonToken:
        """Immutable view of the signed token.

        Raises:
            TokenUsageError: If the token has not been signed yet.
        """
        if self._token_string is None:
            raise TokenUsageError("Token must be signed before it can be materialized")
        return JsonToken(
            header=self.header(),
            payload=dict(self._payload),
            token_string=self._token_string,
        )
