"""
errors.py — Exceptions raised by otp_core.

Every error derives from OTPError, itself a ValueError, so callers that only
care about "bad input" can keep catching ValueError.

A code that simply does not match is NOT an error: validation returns False.
"""


class OTPError(ValueError):
    """Base class for all otp_core errors."""


class InvalidSecretEncoding(OTPError):
    """The secret is not valid Base32 after trimming, uppercasing and padding."""

    def __init__(self, message: str = "Invalid Base32 secret"):
        super().__init__(message)


class InvalidInputLength(OTPError):
    """The passcode length differs from the configured digit count."""

    def __init__(self, message: str = "Unexpected passcode length"):
        super().__init__(message)


class MissingIssuer(OTPError):
    def __init__(self, message: str = "Issuer must be set"):
        super().__init__(message)


class MissingAccountName(OTPError):
    def __init__(self, message: str = "AccountName must be set"):
        super().__init__(message)


class URIParseError(OTPError):
    """The otpauth:// text could not be parsed."""


class RandomSourceError(OTPError):
    """The random byte source failed or returned too few bytes."""


class InvalidCounter(OTPError):
    """The HOTP counter does not fit an unsigned 64-bit integer."""


class InvalidOptions(OTPError):
    """Digits, period or skew outside the supported range."""
