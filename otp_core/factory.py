"""
factory.py — Create new HOTP / TOTP keys.

The secret is drawn from a cryptographically secure source (os.urandom by
default) unless the caller supplies one. The key is built by formatting an
otpauth:// URI and parsing it back with Key.from_url, so a generated key and
a parsed key always behave the same way.
"""

import base64
import logging
import os
from typing import Callable, Optional
from urllib.parse import quote, urlencode

from otp_core.errors import InvalidOptions, MissingAccountName, MissingIssuer, RandomSourceError
from otp_core.key import Key, SCHEME
from otp_core.otp_types import (
    Algorithm,
    Digits,
    DEFAULT_HOTP_SECRET_SIZE,
    DEFAULT_PERIOD,
    DEFAULT_TOTP_SECRET_SIZE,
)

logger = logging.getLogger(__name__)

RandomSource = Callable[[int], bytes]

# characters left unescaped in the label, same set as RFC 3986 pchar
_LABEL_SAFE = "/:@!$&'()*+,;="


def b32encode_nopad(raw: bytes) -> str:
    """Uppercase Base32 without '=' padding, as authenticator apps expect."""
    return base64.b32encode(raw).decode("ascii").rstrip("=")


def _random_secret(size: int, rand: RandomSource) -> bytes:
    try:
        raw = rand(size)
    except Exception as e:
        raise RandomSourceError(f"random source failed: {e}") from e
    if raw is None or len(raw) != size:
        got = 0 if raw is None else len(raw)
        raise RandomSourceError(f"random source returned {got} bytes, expected {size}")
    return bytes(raw)


def _build_key(otp_type: str, issuer: str, account_name: str, params: dict) -> Key:
    label = quote("/" + issuer + ":" + account_name, safe=_LABEL_SAFE)
    query = urlencode(sorted(params.items()))
    url = f"{SCHEME}://{otp_type}{label}?{query}"
    logger.debug("Built %s key for issuer=%r account=%r", otp_type, issuer, account_name)
    return Key.from_url(url)


def _check_digits(digits) -> Digits:
    """0 means six; only 6 and 8 survive a round trip through Key.digits()."""
    if not digits:
        return Digits.SIX
    if digits not in (Digits.SIX, Digits.EIGHT):
        raise InvalidOptions(f"digits must be 6 or 8, got {digits}")
    return Digits(digits)


def _check_names(issuer: str, account_name: str) -> None:
    if not issuer:
        raise MissingIssuer()
    if not account_name:
        raise MissingAccountName()


def generate_hotp(
    issuer: str,
    account_name: str,
    secret_size: int = DEFAULT_HOTP_SECRET_SIZE,
    secret: Optional[bytes] = None,
    digits: Digits = Digits.SIX,
    algorithm: Algorithm = Algorithm.SHA1,
    rand: RandomSource = os.urandom,
) -> Key:
    """
    Create a new counter-based (HOTP) key.

    Arguments:
        issuer: organisation name, required
        account_name: user account label, required
        secret_size: bytes of randomness when no secret is given (0 -> 10)
        secret: raw secret bytes to use instead of random ones
        digits: code length
        algorithm: HMAC hash function
        rand: callable returning n secure random bytes

    Raises:
        MissingIssuer, MissingAccountName, RandomSourceError
        InvalidOptions: digits other than 0, 6 or 8
    """
    _check_names(issuer, account_name)
    digits = _check_digits(digits)
    if not secret_size:
        secret_size = DEFAULT_HOTP_SECRET_SIZE
    raw = secret if secret else _random_secret(secret_size, rand)

    params = {
        "secret": b32encode_nopad(raw),
        "issuer": issuer,
        "algorithm": str(Algorithm.parse(algorithm)),
        "digits": str(digits),
    }
    return _build_key("hotp", issuer, account_name, params)


def generate_totp(
    issuer: str,
    account_name: str,
    period: int = DEFAULT_PERIOD,
    secret_size: int = DEFAULT_TOTP_SECRET_SIZE,
    secret: Optional[bytes] = None,
    digits: Digits = Digits.SIX,
    algorithm: Algorithm = Algorithm.SHA1,
    rand: RandomSource = os.urandom,
) -> Key:
    """
    Create a new time-based (TOTP) key.

    Same arguments as generate_hotp plus `period` (seconds, 0 -> 30).
    The default secret size is 20 bytes. A negative period raises
    InvalidOptions.
    """
    _check_names(issuer, account_name)
    digits = _check_digits(digits)
    if not period:
        period = DEFAULT_PERIOD
    if period < 0:
        raise InvalidOptions(f"period must be positive, got {period}")
    if not secret_size:
        secret_size = DEFAULT_TOTP_SECRET_SIZE
    raw = secret if secret else _random_secret(secret_size, rand)

    params = {
        "secret": b32encode_nopad(raw),
        "issuer": issuer,
        "period": str(int(period)),
        "algorithm": str(Algorithm.parse(algorithm)),
        "digits": str(digits),
    }
    return _build_key("totp", issuer, account_name, params)
