"""Type definitions for SeedAuth."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey


@dataclass(frozen=True)
class KeyPair:
    """An Ed25519 key pair derived from a seed.

    Only signing is exposed. To get the key pair back, derive it again from
    the same seed.
    """

    signing_key: Ed25519PrivateKey
    verifying_key: bytes  # Raw 32-byte Ed25519 public key

    @property
    def public_key_hex(self) -> str:
        return self.verifying_key.hex()

    def sign(self, message: bytes) -> bytes:
        return self.signing_key.sign(message)

    def __repr__(self) -> str:
        return f"KeyPair(verifying_key={self.public_key_hex})"


@dataclass(frozen=True)
class ApiKey:
    """API key entry from the configuration file."""

    id: str
    seed: str  # Ed25519 seed (hex) - keep secret

    def __repr__(self) -> str:
        return f"ApiKey(id={self.id!r}, seed=<redacted>)"


@dataclass(frozen=True)
class Config:
    """Loaded configuration, passed explicitly to clients and commands."""

    api_url: str
    api_key: ApiKey


@dataclass(frozen=True)
class ApprovalChallenge:
    """Server-issued list of transaction attributes to attest to."""

    type: str
    attrs: List[str]


@dataclass(frozen=True)
class ApprovalResponse:
    """Signed answer to an approval challenge."""

    type: str
    sha256: str  # Hex digest of the challenge message
    response: str  # Hex Ed25519 signature over the challenge message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "challenge": {"sha256": self.sha256},
            "response": self.response,
        }


class SeedAuthError(Exception):
    """Base class for all SeedAuth errors."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(f"{type(self).__name__}: {message}")


class InvalidSeedLength(SeedAuthError):
    """Seed is not exactly 32 bytes."""


class InvalidEncoding(SeedAuthError):
    """Malformed hex input."""


class UnsupportedApprovalType(SeedAuthError):
    """Approval challenge declares a scheme other than DSA_ED25519."""


class SigningFailure(SeedAuthError):
    """The signature primitive failed."""


class MalformedChallenge(SeedAuthError):
    """Approval challenge JSON is missing fields or has the wrong shape."""


class MalformedPayload(SeedAuthError):
    """Transaction payload is not an object or lacks a challenged attribute."""


class SignatureError(SeedAuthError):
    """Signature verification failed."""


class ConfigError(SeedAuthError):
    """Configuration file is missing, unreadable or invalid."""


class ApiError(SeedAuthError):
    """Error response from the API."""

    def __init__(self, status_code: int, message: str, detail: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"ApiError({self.status_code}): {self.message} - {self.detail}"
        return f"ApiError({self.status_code}): {self.message}"
