"""jsontoken: signed JSON token issuing and verification."""

from .async_parser import AsyncJsonTokenParser
from .builder import JsonTokenBuilder
from .checkers import AudienceChecker, Checker, IgnoreAudience
from .clock import Clock, SystemClock
from .config import ParserConfig, TelemetryConfig
from .crypto import (
    HmacSHA256Signer,
    HmacSHA256Verifier,
    RsaSHA256Signer,
    RsaSHA256Verifier,
    SignatureAlgorithm,
    Signer,
    Verifier,
)
from .discovery import (
    AsyncVerifierProvider,
    AsyncVerifierProviders,
    InMemoryVerifierProvider,
    VerifierProvider,
    VerifierProviders,
)
from .errors import (
    BadSignatureError,
    CheckerError,
    ErrorCode,
    InvalidTokenError,
    JsonTokenError,
    MalformedTokenError,
    MissingSignatureError,
    NoVerifierError,
    PolicyError,
    SignatureError,
    SigningError,
    TokenTimeRangeError,
    TokenUsageError,
    UnsupportedAlgorithmError,
    VerifierLookupError,
)
from .models import JsonToken
from .parser import JsonTokenParser

__all__ = [
    "AsyncJsonTokenParser",
    "AsyncVerifierProvider",
    "AsyncVerifierProviders",
    "AudienceChecker",
    "BadSignatureError",
    "Checker",
    "CheckerError",
    "Clock",
    "ErrorCode",
    "HmacSHA256Signer",
    "HmacSHA256Verifier",
    "IgnoreAudience",
    "InMemoryVerifierProvider",
    "InvalidTokenError",
    "JsonToken",
    "JsonTokenBuilder",
    "JsonTokenError",
    "JsonTokenParser",
    "MalformedTokenError",
    "MissingSignatureError",
    "NoVerifierError",
    "ParserConfig",
    "PolicyError",
    "RsaSHA256Signer",
    "RsaSHA256Verifier",
    "SignatureAlgorithm",
    "SignatureError",
    "Signer",
    "SigningError",
    "SystemClock",
    "TelemetryConfig",
    "TokenTimeRangeError",
    "TokenUsageError",
    "UnsupportedAlgorithmError",
    "Verifier",
    "VerifierLookupError",
    "VerifierProvider",
    "VerifierProviders",
]

__version__ = "0.1.0"
