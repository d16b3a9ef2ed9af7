"""Hex encoding used for seeds, public keys and signatures."""

import binascii
from typing import Optional

from .types import InvalidEncoding


def to_hex(data: bytes) -> str:
    """Encode bytes as lowercase hex."""
    return binascii.hexlify(data).decode("ascii")


def from_hex(text: str, field: Optional[str] = None) -> bytes:
    """Decode hex text.

    Args:
        text: Even-length hex string (no whitespace or prefix)
        field: Name reported in the error when decoding fails

    Raises:
        InvalidEncoding: If text has odd length or non-hex characters
    """
    name = field or "value"
    if not isinstance(text, str):
        raise InvalidEncoding(f"{name} must be a hex string", field=field)
    if len(text) % 2:
        raise InvalidEncoding(f"{name} has odd length ({len(text)})", field=field)
    try:
        return binascii.unhexlify(text.encode("ascii"))
    except (UnicodeEncodeError, binascii.Error):
        raise InvalidEncoding(f"{name} contains non-hex characters", field=field)
