"""Pydantic models for jsontoken.

``JsonToken`` is the immutable, materialized form of a token: decoded
header and payload plus the exact wire string it came from. Tokens being
built for signing live in ``jsontoken.builder`` instead.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .crypto import SignatureAlgorithm
from .errors import SigningError, TokenUsageError

# Header keys
ALGORITHM_HEADER = "alg"
KEY_ID_HEADER = "kid"
TYPE_HEADER = "typ"

# Reserved payload claims
ISSUER = "iss"
AUDIENCE = "aud"
ISSUED_AT = "iat"
EXPIRATION = "exp"


# 9999-12-31T23:59:59Z, the last instant datetime can represent
MAX_TIMESTAMP = 253402300799


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= MAX_TIMESTAMP


class JsonToken(BaseModel):
    """A decoded token.

    Reserved claims may be absent or null; both read as ``None``. Header
    and payload are stored as read-only mappings.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    header: Mapping[str, Any] = Field(default_factory=dict)
    payload: Mapping[str, Any] = Field(default_factory=dict)
    token_string: str | None = Field(
        default=None,
        description="Exact compact string the token was decoded from",
    )

    @field_validator("header")
    @classmethod
    def validate_header(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        """Validate optional string-valued header parameters."""
        for key in (KEY_ID_HEADER, TYPE_HEADER):
            value = v.get(key)
            if value is not None and not isinstance(value, str):
                msg = f"Header parameter {key!r} must be a string"
                raise ValueError(msg)
        return MappingProxyType(dict(v))

    @field_validator("payload")
    @classmethod
    def validate_reserved_claims(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        """Validate types of the reserved claims that are present."""
        issuer = v.get(ISSUER)
        if issuer is not None and not isinstance(issuer, str):
            msg = "Claim 'iss' must be a string"
            raise ValueError(msg)

        audience = v.get(AUDIENCE)
        if audience is not None and not (
            isinstance(audience, str)
            or (isinstance(audience, list) and all(isinstance(a, str) for a in audience))
        ):
            msg = "Claim 'aud' must be a string or a list of strings"
            raise ValueError(msg)

        for claim in (ISSUED_AT, EXPIRATION):
            value = v.get(claim)
            if value is not None and not _is_timestamp(value):
                msg = f"Claim {claim!r} must be non-negative integer seconds since the epoch"
                raise ValueError(msg)
        return MappingProxyType(dict(v))

    @property
    def signature_algorithm(self) -> SignatureAlgorithm:
        """Algorithm named by the header.

        Raises:
            TokenUsageError: If the header has no ``alg`` parameter.
            UnsupportedAlgorithmError: If ``alg`` names an unknown algorithm.
        """
        name = self.header.get(ALGORITHM_HEADER)
        if name is None:
            raise TokenUsageError("Token header is missing the required 'alg' parameter")
        return SignatureAlgorithm.from_name(name)

    @property
    def key_id(self) -> str | None:
        return self.header.get(KEY_ID_HEADER)

    @property
    def token_type(self) -> str | None:
        return self.header.get(TYPE_HEADER)

    @property
    def issuer(self) -> str | None:
        return self.payload.get(ISSUER)

    @property
    def audience(self) -> str | list[str] | None:
        return self.payload.get(AUDIENCE)

    @property
    def issued_at(self) -> datetime | None:
        """Issued-at as an aware UTC datetime."""
        value = self.payload.get(ISSUED_AT)
        return None if value is None else datetime.fromtimestamp(value, tz=UTC)

    @property
    def expiration(self) -> datetime | None:
        """Expiration as an aware UTC datetime."""
        value = self.payload.get(EXPIRATION)
        return None if value is None else datetime.fromtimestamp(value, tz=UTC)

    def get_param(self, name: str, default: Any = None) -> Any:
        """Get a payload claim by name."""
        return self.payload.get(name, default)

    def serialize_and_sign(self) -> str:
        """Materialized tokens carry no signer and cannot be re-signed.

        Raises:
            SigningError: Always.
        """
        raise SigningError(
            "Token has no signer; a decoded token cannot be serialized and re-signed"
        )
