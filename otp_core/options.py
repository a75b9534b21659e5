"""
options.py — Options passed to the *_custom generate/validate functions.

Plain frozen dataclasses; they hold no state beyond their fields so the same
instance can be shared between threads.
"""

from dataclasses import dataclass

from otp_core.errors import InvalidOptions
from otp_core.otp_types import (
    Algorithm,
    Digits,
    DEFAULT_PERIOD,
    DEFAULT_SKEW,
)


@dataclass(frozen=True)
class HOTPOptions:
    digits: Digits = Digits.SIX
    algorithm: Algorithm = Algorithm.SHA1

    def __post_init__(self):
        # accept plain ints / names from callers
        object.__setattr__(self, "digits", Digits(self.digits))
        object.__setattr__(self, "algorithm", Algorithm.parse(self.algorithm))


@dataclass(frozen=True)
class TOTPOptions:
    """
    period: seconds per time step; 0 or None means DEFAULT_PERIOD.
    skew:   number of extra windows checked on each side of the current one.
    """

    period: int = DEFAULT_PERIOD
    skew: int = DEFAULT_SKEW
    digits: Digits = Digits.SIX
    algorithm: Algorithm = Algorithm.SHA1

    def __post_init__(self):
        if not self.period:
            object.__setattr__(self, "period", DEFAULT_PERIOD)
        if self.period < 0:
            raise InvalidOptions("period must be positive")
        if self.skew < 0:
            raise InvalidOptions("skew must not be negative")
        object.__setattr__(self, "digits", Digits(self.digits))
        object.__setattr__(self, "algorithm", Algorithm.parse(self.algorithm))

    def hotp_options(self) -> HOTPOptions:
        return HOTPOptions(digits=self.digits, algorithm=self.algorithm)
