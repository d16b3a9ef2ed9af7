"""RFC 8032 and end-to-end test vectors."""

import pytest

from seedauth import SignatureError, derive_key_pair, sign_message, verify_signature

# RFC 8032 section 7.1, TEST 1
RFC8032_SEED = "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
RFC8032_PUBLIC_KEY = "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"
RFC8032_SIGNATURE = (
    "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e065224901555"
    "fb8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
)

ZERO_SEED_HEX = "00" * 32
ZERO_SEED_PUBLIC_KEY = "3b6a27bcceb6a42d62a3a8d02a6f0d73653215771de243a63ac048a18b59da29"
MESSAGE = "GET\n/v1/assets\n\nkey-123"
ZERO_SEED_SIGNATURE = (
    "85f0baf72672037ac8aa458a7e9889d62eaaa757970ef293c51c2df2392afb0b"
    "29d9ffa2d85b67371b0cf227e48e1131ccee6dd528668a2bc483426ddd7d3700"
)


def test_rfc8032_test_1():
    key_pair = derive_key_pair(RFC8032_SEED)
    assert key_pair.public_key_hex == RFC8032_PUBLIC_KEY
    assert sign_message(key_pair, b"") == RFC8032_SIGNATURE
    assert verify_signature(RFC8032_PUBLIC_KEY, b"", RFC8032_SIGNATURE)


def test_zero_seed_end_to_end():
    key_pair = derive_key_pair(ZERO_SEED_HEX)
    assert key_pair.public_key_hex == ZERO_SEED_PUBLIC_KEY

    assert sign_message(key_pair, MESSAGE) == ZERO_SEED_SIGNATURE
    assert verify_signature(ZERO_SEED_PUBLIC_KEY, MESSAGE.encode(), ZERO_SEED_SIGNATURE)


@pytest.mark.parametrize("index", [0, 4, len(MESSAGE) - 1])
def test_zero_seed_signature_fails_on_altered_byte(index):
    altered = bytearray(MESSAGE.encode())
    altered[index] ^= 0x01

    with pytest.raises(SignatureError):
        verify_signature(ZERO_SEED_PUBLIC_KEY, bytes(altered), ZERO_SEED_SIGNATURE)
