"""Transaction approval responses.

An approval challenge names the transaction attributes to attest to:

    {"type": "DSA_ED25519", "challenge": {"attrs": ["amount", "to"]}}

The response signs the message ``"amount: 10\\nto: acct-1"`` built from the
transaction and reports its SHA-256 alongside the signature.
"""

import hashlib
import json
import logging
from typing import Any, Mapping, Optional, Union

from .signing import sign_message
from .types import (
    ApprovalChallenge,
    ApprovalResponse,
    KeyPair,
    MalformedChallenge,
    MalformedPayload,
    UnsupportedApprovalType,
)

logger = logging.getLogger(__name__)

APPROVAL_TYPE = "DSA_ED25519"


def parse_challenge(data: Any) -> ApprovalChallenge:
    """Validate challenge JSON and return an ApprovalChallenge.

    Raises:
        MalformedChallenge: If a field is missing or has the wrong type
        UnsupportedApprovalType: If type is not DSA_ED25519
    """
    if not isinstance(data, Mapping):
        raise MalformedChallenge("challenge must be a JSON object")

    approval_type = data.get("type")
    if not isinstance(approval_type, str):
        raise MalformedChallenge("type must be a string", field="type")
    if approval_type != APPROVAL_TYPE:
        raise UnsupportedApprovalType(
            f"unsupported approval type {approval_type!r}, expected {APPROVAL_TYPE!r}",
            field="type",
        )

    body = data.get("challenge")
    if not isinstance(body, Mapping):
        raise MalformedChallenge("challenge must be an object", field="challenge")

    attrs = body.get("attrs")
    if not isinstance(attrs, list):
        raise MalformedChallenge("attrs must be a list", field="challenge.attrs")
    for i, attr in enumerate(attrs):
        if not isinstance(attr, str):
            raise MalformedChallenge(
                "attribute names must be strings", field=f"challenge.attrs[{i}]"
            )

    return ApprovalChallenge(type=approval_type, attrs=list(attrs))


def get_attribute(payload: Mapping[str, Any], name: str) -> Optional[Any]:
    """Look up a challenged attribute in the transaction payload.

    Returns None when the attribute is absent; use ``name in payload`` to tell
    an absent attribute from an explicit null.
    """
    return payload.get(name)


def _render(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def build_challenge_message(
    challenge: ApprovalChallenge,
    payload: Mapping[str, Any],
    allow_missing: bool = False,
) -> str:
    """Render one ``"<attr>: <value>"`` line per challenged attribute.

    Raises:
        MalformedPayload: If an attribute is absent and allow_missing is False
    """
    lines = []
    for name in challenge.attrs:
        if name not in payload:
            if not allow_missing:
                raise MalformedPayload(
                    f"transaction has no attribute {name!r}", field=name
                )
            logger.warning("Attribute %r missing from transaction, signing empty value", name)
            value = None
        else:
            value = get_attribute(payload, name)
        lines.append(f"{name}: {_render(value)}")
    return "\n".join(lines)


def respond(
    challenge: Union[ApprovalChallenge, Mapping[str, Any]],
    payload: Any,
    key_pair: KeyPair,
    allow_missing: bool = False,
) -> ApprovalResponse:
    """Answer an approval challenge for a transaction.

    Args:
        challenge: Parsed challenge or raw challenge JSON
        payload: Transaction JSON object
        key_pair: Approval key pair
        allow_missing: Sign absent attributes as empty values instead of failing

    Returns:
        ApprovalResponse with the message digest and signature

    Raises:
        UnsupportedApprovalType, MalformedChallenge, MalformedPayload,
        SigningFailure
    """
    if not isinstance(challenge, ApprovalChallenge):
        challenge = parse_challenge(challenge)
    elif challenge.type != APPROVAL_TYPE:
        raise UnsupportedApprovalType(
            f"unsupported approval type {challenge.type!r}, expected {APPROVAL_TYPE!r}",
            field="type",
        )

    if not isinstance(payload, Mapping):
        raise MalformedPayload("transaction must be a JSON object")

    message = build_challenge_message(challenge, payload, allow_missing).encode("utf-8")
    digest = hashlib.sha256(message).hexdigest()
    signature = sign_message(key_pair, message)

    logger.debug("Signed approval over attributes %s", ", ".join(challenge.attrs))
    return ApprovalResponse(type=challenge.type, sha256=digest, response=signature)


def dumps_response(response: ApprovalResponse) -> str:
    """Pretty-printed JSON with field order type, challenge.sha256, response."""
    return json.dumps(response.to_dict(), indent=2)
