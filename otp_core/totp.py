"""
totp.py — TOTP (RFC 6238): HOTP with counter = floor(unix_time / period).

Validation accepts a clock skew of +/- `skew` whole periods. Candidate
counters are checked in the order current, +1, -1, +2, -2, ...
"""

import base64
import logging
import math
import time
from datetime import datetime, timezone
from typing import List, Optional, Union

from otp_core import hotp
from otp_core.errors import OTPError
from otp_core.options import TOTPOptions
from otp_core.otp_types import DEFAULT_PERIOD

logger = logging.getLogger(__name__)

Timestamp = Union[datetime, int, float]

_DEFAULT_OPTIONS = TOTPOptions()


# --- Time helpers ------------------------------------------------------------
def unix_seconds(t: Optional[Timestamp] = None) -> float:
    """
    Seconds since the epoch for `t`.

    Arguments:
        t: datetime (naive values are taken as UTC), epoch seconds, or None for now
    """
    if t is None:
        return time.time()
    if isinstance(t, datetime):
        if t.tzinfo is None:
            t = t.replace(tzinfo=timezone.utc)
        return t.timestamp()
    return float(t)


def counter_for(t: Optional[Timestamp] = None, period: int = DEFAULT_PERIOD) -> int:
    """TOTP counter for `t`: floor(unix_seconds / period). Period 0 means 30s."""
    if not period:
        period = DEFAULT_PERIOD
    if isinstance(t, int):
        return t // period
    return int(math.floor(unix_seconds(t) / period))


def remaining_seconds(t: Optional[Timestamp] = None, period: int = DEFAULT_PERIOD) -> int:
    """Seconds until the code for `t` rolls over."""
    if not period:
        period = DEFAULT_PERIOD
    return int(period - (int(unix_seconds(t)) % period))


def candidate_counters(counter: int, skew: int) -> List[int]:
    """
    Counters to try for a given skew: [c, c+1, c-1, ..., c+skew, c-skew].

    Counters outside the unsigned 64-bit range are left out.
    """
    counters = [counter]
    for i in range(1, skew + 1):
        counters.append(counter + i)
        counters.append(counter - i)
    return [c for c in counters if 0 <= c <= hotp.MAX_COUNTER]


# --- Generation / validation -------------------------------------------------
def generate_code_custom(secret_b32: str, t: Optional[Timestamp], opts: TOTPOptions = _DEFAULT_OPTIONS) -> str:
    """
    TOTP code for the time step containing `t`.

    Raises:
        InvalidSecretEncoding: if the secret is not valid Base32
    """
    counter = counter_for(t, opts.period)
    return hotp.generate_code_custom(secret_b32, counter, opts.hotp_options())


def validate_custom(passcode: str, secret_b32: str, t: Optional[Timestamp], opts: TOTPOptions = _DEFAULT_OPTIONS) -> bool:
    """
    Validate a passcode at time `t`, accepting `opts.skew` periods of drift.

    Returns True on the first matching counter. The first hard error
    (bad length, bad secret) is raised immediately and no further counters
    are tried.

    Raises:
        InvalidInputLength, InvalidSecretEncoding
    """
    counter = counter_for(t, opts.period)
    hotp_opts = opts.hotp_options()

    for candidate in candidate_counters(counter, opts.skew):
        if hotp.validate_custom(passcode, candidate, secret_b32, hotp_opts):
            logger.debug("TOTP matched counter=%d (current=%d)", candidate, counter)
            return True
    return False


def generate_code(secret_b32: str, t: Optional[Timestamp] = None) -> str:
    """TOTP code with the defaults (30s, SHA1, 6 digits); `t` defaults to now."""
    return generate_code_custom(secret_b32, t, _DEFAULT_OPTIONS)


def validate(passcode: str, secret_b32: str) -> bool:
    """
    Validate against the current time with the defaults (30s, skew 1,
    SHA1, 6 digits). Malformed input counts as not valid.
    """
    try:
        return validate_custom(passcode, secret_b32, datetime.now(timezone.utc), _DEFAULT_OPTIONS)
    except OTPError as e:
        logger.debug("TOTP validation rejected input: %s", e)
        return False


def generate_passcode(text: str, t: Optional[Timestamp] = None) -> str:
    """
    Current TOTP code for a plain UTF-8 secret (not Base32).

    The text is Base32-encoded first, e.g. generate_passcode("12345678901234567890").
    """
    secret = base64.b32encode(text.encode("utf-8")).decode("ascii")
    return generate_code_custom(secret, t, _DEFAULT_OPTIONS)
