"""
otp_core package
================

One-time passwords (HOTP / TOTP) per RFC 4226 & RFC 6238, plus the
otpauth:// key URI understood by Google Authenticator, Authy, etc.

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- HOTP (HMAC-based One-Time Password):
  code = Truncate(HMAC(key=secret, msg=counter)) mod 10^digits
  → counter increments on every use (event-based tokens).

- TOTP (Time-based One-Time Password):
  HOTP with counter = floor(unix_time / period)
  → default period = 30 seconds, SHA1, 6 digits.
  → validation accepts +/- `skew` periods of clock drift.

- Dynamic Truncation:
  pick 4 bytes of the HMAC at offset (last byte & 0x0F), clear the top bit.

──────────────────────────────────────────────
Quick usage
──────────────────────────────────────────────
>>> from otp_core import generate_totp, totp
>>> key = generate_totp("MyService", "alice@example.com")
>>> code = totp.generate_code(key.secret())
>>> totp.validate(code, key.secret())
True

Render key.image(200, 200) as a QR code for the user to scan, and store
str(key) (the otpauth URI) on your side.
"""

from otp_core import hotp, totp
from otp_core.errors import (
    InvalidInputLength,
    InvalidSecretEncoding,
    MissingAccountName,
    MissingIssuer,
    OTPError,
    RandomSourceError,
    URIParseError,
)
from otp_core.factory import generate_hotp, generate_totp
from otp_core.key import Key, new_key_from_url
from otp_core.options import HOTPOptions, TOTPOptions
from otp_core.otp_types import Algorithm, Digits

__version__ = "1.0.0"

__all__ = [
    "Algorithm",
    "Digits",
    "HOTPOptions",
    "TOTPOptions",
    "Key",
    "new_key_from_url",
    "generate_hotp",
    "generate_totp",
    "hotp",
    "totp",
    "OTPError",
    "InvalidSecretEncoding",
    "InvalidInputLength",
    "MissingIssuer",
    "MissingAccountName",
    "URIParseError",
    "RandomSourceError",
]
