"""Request signing with Ed25519.

Every signed request carries four headers:

    X-SeedAuth-Key-Id     caller-chosen key identifier
    X-SeedAuth-Timestamp  Unix time the request was signed at
    X-SeedAuth-Signature  hex Ed25519 signature over the canonical request
    X-SeedAuth-Version    canonicalization rule ("v1")

The canonical request is a version line followed by method, path, body,
key id and timestamp, each written as ``<byte length>:<bytes>\\n``.
"""

import logging
import re
import time
from typing import Mapping, Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from .encoding import from_hex, to_hex
from .keys import load_public_key
from .types import InvalidEncoding, KeyPair, SignatureError, SigningFailure

logger = logging.getLogger(__name__)

SIGNATURE_VERSION = "v1"

HEADER_KEY_ID = "X-SeedAuth-Key-Id"
HEADER_TIMESTAMP = "X-SeedAuth-Timestamp"
HEADER_SIGNATURE = "X-SeedAuth-Signature"
HEADER_VERSION = "X-SeedAuth-Version"

Body = Union[str, bytes, None]
PublicKey = Union[Ed25519PublicKey, bytes, str]


def _field(value: bytes) -> bytes:
    return str(len(value)).encode("ascii") + b":" + value + b"\n"


def _body_bytes(body: Body) -> bytes:
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


def canonicalize(
    method: str,
    path: str,
    body: Body,
    key_id: str,
    timestamp: Optional[int] = None,
) -> bytes:
    """Build the canonical byte string for a request.

    Args:
        method: HTTP method (upper-cased)
        path: Request path and query, used exactly as given
        body: Request body; None is the same as an empty body
        key_id: Key identifier
        timestamp: Unix timestamp supplied by the signer (optional)

    Returns:
        Bytes that differ for any two different inputs
    """
    parts = [
        f"seedauth-{SIGNATURE_VERSION}\n".encode("ascii"),
        _field(method.upper().encode("utf-8")),
        _field(path.encode("utf-8")),
        _field(_body_bytes(body)),
        _field(key_id.encode("utf-8")),
        _field(b"" if timestamp is None else str(int(timestamp)).encode("ascii")),
    ]
    return b"".join(parts)


def sign_message(key_pair: KeyPair, message: Union[str, bytes]) -> str:
    """Sign raw bytes and return the hex signature.

    Raises:
        SigningFailure: If the signature primitive fails
    """
    if isinstance(message, str):
        message = message.encode("utf-8")
    try:
        signature = key_pair.sign(message)
    except Exception as exc:
        logger.error(
            "Signing failed for %d-byte message with key %s",
            len(message),
            key_pair.public_key_hex,
        )
        raise SigningFailure(f"signature operation failed: {exc}") from exc
    return to_hex(signature)


def sign_request(
    key_pair: KeyPair,
    key_id: str,
    method: str,
    path: str,
    body: Body = None,
    headers: Optional[Mapping[str, str]] = None,
    timestamp: Optional[int] = None,
) -> dict:
    """Sign an HTTP request.

    Args:
        key_pair: Key pair derived from the API key seed
        key_id: Key identifier sent to the server
        method: HTTP method
        path: Request path (and query) as sent to the server
        body: Request body (optional)
        headers: Existing headers, copied and not modified (optional)
        timestamp: Unix timestamp to sign with (default: now)

    Returns:
        Headers dict with the SeedAuth headers added
    """
    headers = dict(headers or {})
    if timestamp is None:
        timestamp = int(time.time())

    message = canonicalize(method, path, body, key_id, timestamp)
    signature = sign_message(key_pair, message)

    headers[HEADER_KEY_ID] = key_id
    headers[HEADER_TIMESTAMP] = str(timestamp)
    headers[HEADER_SIGNATURE] = signature
    headers[HEADER_VERSION] = SIGNATURE_VERSION

    logger.debug("Signed %s %s with key id %s", method.upper(), path, key_id)
    return headers


def verify_signature(
    public_key: PublicKey,
    message: Union[str, bytes],
    signature_hex: str,
) -> bool:
    """Verify a hex signature over a message.

    Returns:
        True if signature is valid

    Raises:
        SignatureError: If the signature is malformed or does not match
    """
    if isinstance(message, str):
        message = message.encode("utf-8")
    if not isinstance(public_key, Ed25519PublicKey):
        public_key = load_public_key(public_key)

    try:
        signature = from_hex(signature_hex, field="signature")
    except InvalidEncoding as exc:
        raise SignatureError(f"Invalid signature encoding: {exc.message}", field="signature")

    try:
        public_key.verify(signature, message)
    except InvalidSignature:
        raise SignatureError("Signature verification failed", field="signature")
    return True


def verify_request(
    method: str,
    path: str,
    headers: Mapping[str, str],
    body: Body,
    public_key: PublicKey,
    max_age_seconds: Optional[int] = 300,
    max_clock_skew_seconds: int = 60,
    now: Optional[int] = None,
) -> bool:
    """Verify a signed HTTP request.

    Args:
        method: HTTP method
        path: Request path (and query) as received
        headers: Request headers (must include the SeedAuth headers)
        body: Request body (optional)
        public_key: Ed25519 public key of the signer
        max_age_seconds: Maximum signature age, None to skip the check
        max_clock_skew_seconds: Allowed clock skew for future timestamps
        now: Current Unix time (default: time.time())

    Returns:
        True if signature is valid

    Raises:
        SignatureError: If headers are missing, the signature is stale or invalid
    """
    header_lookup = {k.lower(): v for k, v in headers.items()}

    for name in (HEADER_KEY_ID, HEADER_TIMESTAMP, HEADER_SIGNATURE, HEADER_VERSION):
        if not header_lookup.get(name.lower()):
            raise SignatureError(f"Missing {name} header", field=name)

    version = header_lookup[HEADER_VERSION.lower()]
    if version != SIGNATURE_VERSION:
        raise SignatureError(f"Unsupported signature version: {version}", field=HEADER_VERSION)

    timestamp_header = header_lookup[HEADER_TIMESTAMP.lower()]
    if not re.fullmatch(r"[0-9]+", timestamp_header):
        raise SignatureError("Invalid timestamp", field=HEADER_TIMESTAMP)
    timestamp = int(timestamp_header)

    if max_age_seconds is not None:
        current = int(time.time()) if now is None else now
        if current - timestamp > max_age_seconds:
            raise SignatureError(
                f"Signature expired (age: {current - timestamp}s, max: {max_age_seconds}s)",
                field=HEADER_TIMESTAMP,
            )
        if timestamp > current + max_clock_skew_seconds:
            raise SignatureError("Signature created in the future", field=HEADER_TIMESTAMP)

    key_id = header_lookup[HEADER_KEY_ID.lower()]
    message = canonicalize(method, path, body, key_id, timestamp)
    return verify_signature(public_key, message, header_lookup[HEADER_SIGNATURE.lower()])


def extract_key_id(headers: Mapping[str, str]) -> Optional[str]:
    """Extract the key ID from request headers."""
    header_lookup = {k.lower(): v for k, v in headers.items()}
    return header_lookup.get(HEADER_KEY_ID.lower())
