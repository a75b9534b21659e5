"""
key.py — Key: an OTP credential described by an otpauth:// URI.

URI format (Google Authenticator "Key Uri Format"):

    otpauth://totp/ACME%20Co:john.doe@email.com?secret=HXDMVJECJJWSRB3HWIZR4IFUGFTMXBOZ
        &issuer=ACME%20Co&algorithm=SHA1&digits=6&period=30

The URI text is the only state a Key holds. Every accessor re-reads it, so
str(Key.from_url(s)) == s.strip() always holds.
"""

import logging
import re
from urllib.parse import parse_qs, unquote, urlsplit

import qrcode
from PIL import Image

from otp_core.errors import URIParseError
from otp_core.options import HOTPOptions, TOTPOptions
from otp_core.otp_types import Algorithm, Digits, DEFAULT_PERIOD, DEFAULT_SKEW

logger = logging.getLogger(__name__)

SCHEME = "otpauth"
TYPES = ("totp", "hotp")
MAX_PERIOD = 2 ** 64 - 1

_CTL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_UNSIGNED = re.compile(r"[0-9]+")


class Key:
    """A TOTP or HOTP key. Build it with Key.from_url or the factory module."""

    __slots__ = ("_orig", "_parts")

    def __init__(self, orig: str, parts):
        self._orig = orig
        self._parts = parts

    @classmethod
    def from_url(cls, orig: str) -> "Key":
        """
        Parse an otpauth:// URI.

        Surrounding whitespace is stripped before parsing and is not part of
        the stored text.

        Raises:
            URIParseError: malformed URI, wrong scheme, or type not totp/hotp
        """
        s = orig.strip()
        if _CTL_CHARS.search(s):
            raise URIParseError(f"invalid control character in URL: {s!r}")
        if _BAD_ESCAPE.search(s):
            raise URIParseError(f"invalid URL escape in: {s!r}")
        try:
            parts = urlsplit(s)
        except ValueError as e:
            raise URIParseError(str(e)) from e

        if parts.scheme.lower() != SCHEME:
            raise URIParseError(f"unsupported scheme {parts.scheme!r}, expected {SCHEME!r}")
        if parts.netloc not in TYPES:
            raise URIParseError(f"unsupported OTP type {parts.netloc!r}, expected one of {TYPES}")
        return cls(s, parts)

    # --- raw URI pieces ------------------------------------------------------
    def _query(self, name: str) -> str:
        values = parse_qs(self._parts.query, keep_blank_values=True).get(name)
        return values[0] if values else ""

    def _label(self) -> str:
        path = unquote(self._parts.path)
        return path[1:] if path.startswith("/") else path

    # --- accessors -----------------------------------------------------------
    def type(self) -> str:
        """'totp' or 'hotp'."""
        return self._parts.netloc

    def issuer(self) -> str:
        """The `issuer` parameter, else the label part before ':', else ''."""
        issuer = self._query("issuer")
        if issuer:
            return issuer
        label = self._label()
        i = label.find(":")
        if i == -1:
            return ""
        return label[:i]

    def account_name(self) -> str:
        label = self._label()
        i = label.find(":")
        if i == -1:
            return label
        return label[i + 1:]

    def secret(self) -> str:
        """Base32 secret exactly as stored in the URI (not decoded)."""
        return self._query("secret")

    def period(self) -> int:
        """Rotation period in seconds; 30 when missing or not a valid number."""
        value = self._query("period")
        if _UNSIGNED.fullmatch(value) and int(value) <= MAX_PERIOD:
            return int(value)
        if value:
            logger.warning("Invalid OTP period %r, falling back to %d", value, DEFAULT_PERIOD)
        return DEFAULT_PERIOD

    def digits(self) -> Digits:
        return Digits.parse(self._query("digits"))

    def algorithm(self) -> Algorithm:
        return Algorithm.parse(self._query("algorithm"))

    def url(self) -> str:
        return self._orig

    def hotp_options(self) -> HOTPOptions:
        return HOTPOptions(digits=self.digits(), algorithm=self.algorithm())

    def totp_options(self, skew: int = DEFAULT_SKEW) -> TOTPOptions:
        return TOTPOptions(
            period=self.period(),
            skew=skew,
            digits=self.digits(),
            algorithm=self.algorithm(),
        )

    # --- QR code -------------------------------------------------------------
    def image(self, width: int, height: int) -> Image.Image:
        """
        QR code of the URI text, as a `width` x `height` grayscale image.

        The code is scaled by the largest integer factor that fits and
        centred on a white background.

        Raises:
            qrcode.exceptions.DataOverflowError: the URI is too long for a QR code
            ValueError: the requested size is smaller than the QR code itself
        """
        qr = qrcode.QRCode(
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=1,
            border=0,
        )
        qr.add_data(self._orig)
        qr.make(fit=True)
        size = qr.modules_count

        scale = min(width // size, height // size)
        if scale < 1:
            raise ValueError(
                f"can not scale QR code to an image smaller than {size}x{size}"
            )

        qr.box_size = scale
        code = qr.make_image(fill_color="black", back_color="white").get_image().convert("L")

        img = Image.new("L", (width, height), 255)
        img.paste(code, ((width - code.width) // 2, (height - code.height) // 2))
        return img

    # --- dunder --------------------------------------------------------------
    def __str__(self) -> str:
        return self._orig

    def __repr__(self) -> str:
        return f"Key({self._orig!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self._orig == other._orig

    def __hash__(self) -> int:
        return hash(self._orig)


def new_key_from_url(orig: str) -> Key:
    """Shortcut for Key.from_url."""
    return Key.from_url(orig)
