"""
hotp.py — HOTP (RFC 4226): counter-based one-time codes.

Pure functions, no I/O. The TOTP layer (totp.py) is built on top of
generate_code_custom / validate_custom.

Security notes:
- Passcodes are compared with hmac.compare_digest (constant time).
- Secrets and codes are never logged, only counters and intermediate ints.
"""

import base64
import binascii
import hmac
import logging
import struct

from otp_core.errors import InvalidCounter, InvalidInputLength, InvalidSecretEncoding, OTPError
from otp_core.options import HOTPOptions

logger = logging.getLogger(__name__)

MAX_COUNTER = 2 ** 64 - 1

_DEFAULT_OPTIONS = HOTPOptions()


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Convert the counter to the 8-byte big-endian message required by RFC 4226.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'

    Raises:
        InvalidCounter: if the counter does not fit an unsigned 64-bit integer
    """
    if not 0 <= i <= MAX_COUNTER:
        raise InvalidCounter(f"counter out of range for uint64: {i}")
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation.

    - offset = last_byte & 0x0F
    - take 4 bytes from offset, clear the MSB (0x7F) of the first one
    - return the resulting 31-bit (non-negative) integer

    Arguments:
        hmac_digest: HMAC digest (SHA1 -> 20 bytes, MD5 -> 16 bytes, ...)

    For digests shorter than 19 bytes (MD5) the offset is clamped so the
    4-byte window stays inside the digest. SHA1/SHA256/SHA512 are unaffected.
    """
    offset = min(hmac_digest[-1] & 0x0F, len(hmac_digest) - 4)
    code = (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )
    logger.debug("offset=%d value=%d", offset, code)
    return code


def normalize_secret(secret_b32: str) -> str:
    """Trim whitespace, uppercase and pad with '=' to a multiple of 8 chars."""
    secret = secret_b32.strip().upper()
    missing_padding = len(secret) % 8
    if missing_padding:
        secret += "=" * (8 - missing_padding)
    return secret


def decode_secret(secret_b32: str) -> bytes:
    """
    Base32-decode a secret as typed by users or stored in an otpauth URI.

    Lowercase and unpadded input is accepted.

    Raises:
        InvalidSecretEncoding: if the text is not valid Base32
    """
    try:
        return base64.b32decode(normalize_secret(secret_b32))
    except (binascii.Error, ValueError) as e:
        raise InvalidSecretEncoding() from e


# --- Generation / validation -----------------------------------------------
def generate_code_custom(secret_b32: str, counter: int, opts: HOTPOptions = _DEFAULT_OPTIONS) -> str:
    """
    Compute the HOTP code for `counter`.

    Steps:
    1. Base32-decode secret -> raw key bytes
    2. Message = 8-byte counter (big-endian)
    3. HMAC(opts.algorithm)(key, message)
    4. Dynamic truncate -> 31-bit value
    5. value % 10^digits, zero-padded to `digits` characters

    Arguments:
        secret_b32: Base32 secret (case-insensitive, padding optional)
        counter: unsigned 64-bit counter
        opts: digit count and hash algorithm

    Returns:
        str: the zero-padded code

    Raises:
        InvalidSecretEncoding: if the secret is not valid Base32
    """
    key = decode_secret(secret_b32)
    msg = int_to_bytes(counter)
    logger.debug("counter=%d algorithm=%s", counter, opts.algorithm)

    digest = hmac.new(key, msg, opts.algorithm.digestmod).digest()
    value = dynamic_truncate(digest)
    return opts.digits.format(value)


def validate_custom(passcode: str, counter: int, secret_b32: str, opts: HOTPOptions = _DEFAULT_OPTIONS) -> bool:
    """
    Check a user supplied passcode against the code for `counter`.

    Surrounding whitespace of the passcode is ignored. The length is checked
    before any cryptographic work.

    Returns:
        bool: True on an exact match, False otherwise

    Raises:
        InvalidInputLength: if len(passcode) != opts.digits
        InvalidSecretEncoding: if the secret is not valid Base32
    """
    passcode = passcode.strip()
    if len(passcode) != opts.digits.length():
        raise InvalidInputLength()

    expected = generate_code_custom(secret_b32, counter, opts)
    return hmac.compare_digest(expected.encode("ascii"), passcode.encode("utf-8"))


def generate_code(secret_b32: str, counter: int) -> str:
    """HOTP code with the defaults (SHA1, 6 digits)."""
    return generate_code_custom(secret_b32, counter, _DEFAULT_OPTIONS)


def validate(passcode: str, counter: int, secret_b32: str) -> bool:
    """
    Validate with the defaults (SHA1, 6 digits).

    Malformed input (bad length, bad secret) counts as not valid.
    """
    try:
        return validate_custom(passcode, counter, secret_b32, _DEFAULT_OPTIONS)
    except OTPError as e:
        logger.debug("HOTP validation rejected input: %s", e)
        return False
