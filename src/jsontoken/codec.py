"""Compact wire format codec.

``base64url(header).base64url(payload).base64url(signature)``, unpadded,
exactly two separators. Decoding keeps the received string verbatim so
signatures are checked against the bytes that were actually sent.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any

from jwt.utils import base64url_decode, base64url_encode
from pydantic import ValidationError as ModelValidationError

from .core.errors import ErrorFactory
from .models import JsonToken

SEPARATOR = "."

_SEGMENT_PATTERN = re.compile(r"[A-Za-z0-9_-]*")


def encode_segment(value: Mapping[str, Any]) -> str:
    """Serialize a JSON object and base64url-encode it."""
    data = json.dumps(dict(value), separators=(",", ":"), ensure_ascii=False)
    return base64url_encode(data.encode("utf-8")).decode("ascii")


def encode_bytes(data: bytes) -> str:
    return base64url_encode(data).decode("ascii")


def decode_bytes(segment: str) -> bytes:
    """Decode an unpadded base64url segment.

    Raises:
        ValueError: If the segment is not valid base64url.
    """
    if _SEGMENT_PATTERN.fullmatch(segment) is None:
        msg = "Segment contains characters outside the base64url alphabet"
        raise ValueError(msg)
    return base64url_decode(segment)


def signing_input_for(header: Mapping[str, Any], payload: Mapping[str, Any]) -> str:
    """Build ``base64url(header).base64url(payload)``."""
    return f"{encode_segment(header)}{SEPARATOR}{encode_segment(payload)}"


def encode(header: Mapping[str, Any], payload: Mapping[str, Any], signature: bytes) -> str:
    """Assemble a compact token string."""
    return f"{signing_input_for(header, payload)}{SEPARATOR}{encode_bytes(signature)}"


def split_token(token_string: str) -> tuple[str, str, str]:
    """Split a compact token into its three segments.

    Raises:
        MalformedTokenError: If the string does not have exactly three segments.
    """
    parts = token_string.split(SEPARATOR)
    if len(parts) != 3:
        raise ErrorFactory.malformed(
            f"Token string must have 3 segments, found {len(parts)}"
        )
    return parts[0], parts[1], parts[2]


def signing_input(token_string: str) -> bytes:
    """Bytes covered by the signature, taken verbatim from the wire."""
    header, payload, _ = split_token(token_string)
    return f"{header}{SEPARATOR}{payload}".encode("ascii")


def _decode_object(segment: str, name: str) -> dict[str, Any]:
    try:
        value = json.loads(decode_bytes(segment))
    except (ValueError, RecursionError) as e:
        raise ErrorFactory.malformed(f"Token {name} is not valid base64url JSON", e) from e
    if not isinstance(value, dict):
        raise ErrorFactory.malformed(f"Token {name} must be a JSON object")
    return value


def decode_claims(token_string: str) -> tuple[dict[str, Any], dict[str, Any]]:
    """Decode the header and payload objects of a compact token string.

    Raises:
        MalformedTokenError: On bad segment count, base64url or JSON.
    """
    header_segment, payload_segment, _ = split_token(token_string)
    return _decode_object(header_segment, "header"), _decode_object(payload_segment, "payload")


def decode(token_string: str, *, max_length: int | None = None) -> JsonToken:
    """Decode a compact token string without verifying anything.

    An empty signature segment is accepted here; signature presence is
    checked at verification time.

    Raises:
        MalformedTokenError: On bad segment count, base64url or JSON.
    """
    if not isinstance(token_string, str):
        msg = f"Token string must be str, not {type(token_string).__name__}"
        raise TypeError(msg)
    if max_length is not None and len(token_string) > max_length:
        raise ErrorFactory.malformed(f"Token string exceeds {max_length} characters")

    header, payload = decode_claims(token_string)
    try:
        return JsonToken(header=header, payload=payload, token_string=token_string)
    except ModelValidationError as e:
        raise ErrorFactory.malformed(f"Token claims are invalid: {e}", e) from e
