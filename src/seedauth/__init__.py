"""seedauth - Ed25519 request and approval signing.

Keys are derived from a 32-byte seed; signatures and keys travel as hex.
"""

__version__ = "0.1.0"

from .approval import build_challenge_message, get_attribute, parse_challenge, respond
from .client import SeedAuthClient
from .config import config_from_dict, load_config
from .encoding import from_hex, to_hex
from .keys import derive_key_pair, generate_seed, load_public_key, public_key
from .signing import (
    canonicalize,
    extract_key_id,
    sign_message,
    sign_request,
    verify_request,
    verify_signature,
)
from .types import (
    ApiError,
    ApiKey,
    ApprovalChallenge,
    ApprovalResponse,
    Config,
    ConfigError,
    InvalidEncoding,
    InvalidSeedLength,
    KeyPair,
    MalformedChallenge,
    MalformedPayload,
    SeedAuthError,
    SignatureError,
    SigningFailure,
    UnsupportedApprovalType,
)

__all__ = [
    # Client
    "SeedAuthClient",
    # Types
    "KeyPair",
    "Config",
    "ApiKey",
    "ApprovalChallenge",
    "ApprovalResponse",
    # Errors
    "SeedAuthError",
    "InvalidSeedLength",
    "InvalidEncoding",
    "UnsupportedApprovalType",
    "SigningFailure",
    "MalformedChallenge",
    "MalformedPayload",
    "SignatureError",
    "ConfigError",
    "ApiError",
    # Keys and encoding
    "generate_seed",
    "derive_key_pair",
    "public_key",
    "load_public_key",
    "to_hex",
    "from_hex",
    # Signing
    "canonicalize",
    "sign_message",
    "sign_request",
    "verify_signature",
    "verify_request",
    "extract_key_id",
    # Approvals
    "parse_challenge",
    "get_attribute",
    "build_challenge_message",
    "respond",
    # Configuration
    "load_config",
    "config_from_dict",
]
