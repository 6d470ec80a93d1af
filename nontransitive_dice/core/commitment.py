
"""
commitment.py
HMAC-SHA3-256 commitments binding a party to a secret value before the counterpart acts.
Related modules:
- fair_random.py: Commits during setup and verifies at reveal time.
"""

import hashlib
import hmac
import secrets

from .errors import OutOfRange

VALUE_BYTES = 4
KEY_SIZE = 32
DIGEST = hashlib.sha3_256


def encode_value(secret_value: int) -> bytes:
    """
    Encode a secret value as a fixed 4-byte big-endian word.
    Raises:
        OutOfRange: If the value is negative or does not fit in 32 bits.
    """
    if isinstance(secret_value, bool) or not isinstance(secret_value, int):
        raise OutOfRange(f"secret value must be an integer, got {secret_value!r}")
    if not (0 <= secret_value < 1 << (8 * VALUE_BYTES)):
        raise OutOfRange(f"secret value {secret_value} does not fit in {VALUE_BYTES} bytes")
    return secret_value.to_bytes(VALUE_BYTES, "big")


def new_key(size: int = KEY_SIZE) -> bytes:
    """Return fresh key material. Never reuse a key across commitments."""
    return secrets.token_bytes(size)


def commit(secret_value: int, key: bytes) -> bytes:
    """
    Compute the commitment to secret_value under key.
    The same inputs always give the same commitment, which is what makes verification possible.
    Args:
        secret_value (int): Value being committed to, 0 <= value < 2**32.
        key (bytes): Secret key material.
    Returns:
        bytes: 32-byte authentication tag.
    """
    return hmac.new(key, encode_value(secret_value), DIGEST).digest()


def verify(commitment: bytes, secret_value: int, key: bytes) -> bool:
    """
    Check that (secret_value, key) reproduces commitment.
    Returns:
        bool: True if the recomputed tag equals commitment.
    """
    try:
        expected = commit(secret_value, key)
    except OutOfRange:
        return False
    return hmac.compare_digest(expected, commitment)
