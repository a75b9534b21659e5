"""
otp_types.py — Hash algorithm and digit-count value types.

- Algorithm: closed set of HMAC hash functions usable for OTP codes.
- Digits: number of decimal digits in a code, plus its zero-padding rules.

Both are immutable. Unknown values read from an otpauth URI fall back to the
defaults (SHA1 / 6 digits) like common authenticator apps do; the fallback is
logged because it can silently weaken a credential.
"""

import enum
import hashlib
import logging

from otp_core.errors import InvalidOptions

logger = logging.getLogger(__name__)

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6                # standard: 6 digits
DEFAULT_PERIOD = 30               # TOTP step (seconds)
DEFAULT_SKEW = 1                  # +/- windows accepted around "now"
DEFAULT_HOTP_SECRET_SIZE = 10     # 80-bit secret
DEFAULT_TOTP_SECRET_SIZE = 20     # 160-bit secret (common practice)


class Algorithm(enum.Enum):
    """
    Hash function used by the HMAC step of HOTP/TOTP.

    The enum value is the canonical uppercase name written in otpauth URIs.
    """

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"
    MD5 = "MD5"

    def __str__(self) -> str:
        return self.value

    @property
    def digestmod(self):
        """hashlib constructor, suitable as `hmac.new(..., digestmod=...)`."""
        return _HASHES[self]

    def new_hash(self, data: bytes = b""):
        return self.digestmod(data)

    @classmethod
    def parse(cls, value) -> "Algorithm":
        """
        Case-insensitive lookup by name.

        Missing or unrecognised values return SHA1 instead of raising.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.SHA1
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            logger.warning("Unknown OTP algorithm %r, falling back to SHA1", value)
            return cls.SHA1


_HASHES = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
    Algorithm.MD5: hashlib.md5,
}


class Digits(int):
    """
    Number of digits in an OTP code.

    Six and eight are what authenticator apps understand, but format/length
    work for any positive count.

    >>> Digits(6).format(1234)
    '001234'
    """

    SIX: "Digits"
    EIGHT: "Digits"

    def __new__(cls, value: int = DEFAULT_DIGITS):
        value = int(value)
        if value <= 0:
            raise InvalidOptions(f"digits must be a positive integer, got {value}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Digits({int(self)})"

    def __str__(self) -> str:
        return str(int(self))

    def length(self) -> int:
        return int(self)

    def format(self, value: int) -> str:
        """Zero-padded decimal of `value mod 10**length()`."""
        return str(value % (10 ** self.length())).zfill(self.length())

    @classmethod
    def parse(cls, value) -> "Digits":
        """
        The URI text "8" (or the int 8) selects eight digits; anything else
        is six.
        """
        if value == "8" or (isinstance(value, int) and value == 8):
            return cls.EIGHT
        if value not in (None, "", "6", 6):
            logger.warning("Unsupported OTP digits %r, falling back to 6", value)
        return cls.SIX


Digits.SIX = Digits(6)
Digits.EIGHT = Digits(8)
