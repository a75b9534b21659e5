#!/usr/bin/env python3
"""
otp_cli.py — CLI wrapper around otp_core.

Subcommands:
- init   : create a TOTP/HOTP key, print its otpauth URI and write a QR code PNG
- totp   : show the current TOTP code for a key
- hotp   : generate the HOTP code for a counter
- uri    : print the fields of an otpauth URI
- verify : check a TOTP/HOTP code (exit status 0 = valid, 1 = invalid)

Nothing is stored: keys are passed on the command line with --uri (or a bare
--secret plus --digits/--period/--algorithm).

eg..:
    otp-cli init --issuer MyService --account alice@example --qr qr-code.png
    otp-cli totp --uri "otpauth://totp/MyService:alice@example?secret=..."
    otp-cli hotp --secret JBSWY3DPEHPK3PXP --counter 42
    otp-cli verify totp --uri "otpauth://..." --code 123456 --window 1
"""

import argparse
import logging
import sys
import time

from otp_core import factory, hotp, totp
from otp_core.errors import OTPError
from otp_core.key import Key
from otp_core.options import HOTPOptions, TOTPOptions
from otp_core.otp_types import Algorithm, Digits, DEFAULT_PERIOD, DEFAULT_SKEW

logger = logging.getLogger("otp_core.cli")

QR_SIZE = 200


# --- helpers -----------------------------------------------------------------
def _key_from_args(args):
    if getattr(args, "uri", None):
        return Key.from_url(args.uri)
    return None


def _secret_and_options(args):
    """(secret, digits, algorithm, period) from --uri or the explicit flags."""
    key = _key_from_args(args)
    if key is not None:
        digits = args.digits or key.digits()
        period = getattr(args, "period", None) or key.period()
        return key.secret(), Digits(digits), key.algorithm(), period
    if not args.secret:
        raise SystemExit("error: one of --uri or --secret is required")
    digits = args.digits or Digits.SIX
    period = getattr(args, "period", None) or DEFAULT_PERIOD
    return args.secret, Digits(digits), Algorithm.parse(args.algorithm), period


def display(key: Key) -> None:
    print(f"Type: {key.type()}")
    print(f"Issuer: {key.issuer()}")
    print(f"Account Name: {key.account_name()}")
    print(f"Secret: {key.secret()}")
    print(f"Algorithm: {key.algorithm()}")
    print(f"Digits: {key.digits()}")
    if key.type() == "totp":
        print(f"Period: {key.period()}")
    print(f"URL: {key.url()}")


# --- CLI command handlers ------------------------------------------------------
def cmd_init(args):
    if args.type == "hotp":
        key = factory.generate_hotp(
            args.issuer, args.account,
            digits=Digits(args.digits), algorithm=Algorithm.parse(args.algorithm),
        )
    else:
        key = factory.generate_totp(
            args.issuer, args.account, period=args.period,
            digits=Digits(args.digits), algorithm=Algorithm.parse(args.algorithm),
        )
    display(key)

    if args.qr:
        key.image(QR_SIZE, QR_SIZE).save(args.qr, format="PNG")
        print(f"[*] QR code written to {args.qr}")
        print("[*] Please add this key to your OTP application now!")

    if args.prompt:
        passcode = input("Enter passcode: ")
        if key.type() == "hotp":
            ok = hotp.validate_custom(passcode, 0, key.secret(), key.hotp_options())
        else:
            ok = totp.validate_custom(passcode, key.secret(), None, key.totp_options())
        print("[+] Passcode is VALID" if ok else "[-] Passcode is INVALID")
        return 0 if ok else 1
    return 0


def cmd_totp(args):
    secret, digits, algorithm, period = _secret_and_options(args)
    opts = TOTPOptions(period=period, digits=digits, algorithm=algorithm)
    if not args.watch:
        code = totp.generate_code_custom(secret, None, opts)
        print(f"TOTP ({digits}d): {code}  (valid ~{totp.remaining_seconds(None, opts.period):2d}s)")
        return 0

    print(f"Press Ctrl+C to quit. Generating {digits}-digit TOTP every {opts.period}s...\n")
    last_code = None
    try:
        while True:
            now = int(time.time())
            code = totp.generate_code_custom(secret, now, opts)
            remaining = totp.remaining_seconds(now, opts.period)
            if code != last_code:
                print(f"TOTP ({digits}d): {code}  (valid ~{remaining:2d}s)")
                last_code = code
            else:
                print(f".. {remaining:2d}s left", end="\r", flush=True)
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nBye.")
    return 0


def cmd_hotp(args):
    secret, digits, algorithm, _ = _secret_and_options(args)
    code = hotp.generate_code_custom(secret, args.counter, HOTPOptions(digits=digits, algorithm=algorithm))
    print(f"HOTP({digits}d, counter={args.counter}): {code}")
    return 0


def cmd_uri(args):
    display(Key.from_url(args.uri))
    return 0


def cmd_verify_totp(args):
    secret, digits, algorithm, period = _secret_and_options(args)
    opts = TOTPOptions(period=period, skew=args.window, digits=digits, algorithm=algorithm)
    ok = totp.validate_custom(args.code, secret, args.timestamp, opts)
    print("[+] TOTP code is VALID" if ok else "[-] TOTP code is INVALID")
    return 0 if ok else 1


def cmd_verify_hotp(args):
    secret, digits, algorithm, _ = _secret_and_options(args)
    opts = HOTPOptions(digits=digits, algorithm=algorithm)
    for i in range(args.look_ahead + 1):
        if hotp.validate_custom(args.code, args.counter + i, secret, opts):
            print(f"[+] HOTP code is VALID (next counter = {args.counter + i + 1})")
            return 0
    print("[-] HOTP code is INVALID")
    return 1


def cmd_help(args):
    print("'otp-cli -h' for help.")
    return 0


# --- Argparse builder ----------------------------------------------------------
def _add_key_args(p, with_period=True):
    p.add_argument("--uri", help="otpauth:// URI of the key")
    p.add_argument("--secret", help="Base32 secret (when no --uri is given)")
    p.add_argument("--digits", type=int, help="Override number of digits")
    p.add_argument("--algorithm", default="SHA1", help="HMAC algorithm for --secret")
    if with_period:
        p.add_argument("--period", type=int, help="Override TOTP period (seconds)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="TOTP/HOTP generator and otpauth URI tool")
    p.add_argument("--verbose", action="store_true", help="Verbose (debug) logging")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    # init
    pi = sub.add_parser("init", help="Create a new key and print its otpauth URI")
    pi.add_argument("--issuer", required=True, help="Issuer label for otpauth URI")
    pi.add_argument("--account", required=True, help="Account label for otpauth URI")
    pi.add_argument("--type", choices=("totp", "hotp"), default="totp")
    pi.add_argument("--digits", type=int, choices=(6, 8), default=6, help="Number of OTP digits")
    pi.add_argument("--period", type=int, default=DEFAULT_PERIOD, help="TOTP time step (seconds)")
    pi.add_argument("--algorithm", default="SHA1", choices=[a.value for a in Algorithm])
    pi.add_argument("--qr", metavar="PATH", help="Write a PNG QR code to PATH")
    pi.add_argument("--prompt", action="store_true", help="Ask for a passcode and validate it")
    pi.set_defaults(func=cmd_init)

    # totp
    pt = sub.add_parser("totp", help="Show the current TOTP code")
    _add_key_args(pt)
    pt.add_argument("--watch", action="store_true", help="Keep printing codes in real time")
    pt.set_defaults(func=cmd_totp)

    # hotp
    ph = sub.add_parser("hotp", help="Generate HOTP code for a specific counter")
    _add_key_args(ph, with_period=False)
    ph.add_argument("--counter", type=int, required=True)
    ph.set_defaults(func=cmd_hotp)

    # uri
    pu = sub.add_parser("uri", help="Print the fields of an otpauth URI")
    pu.add_argument("--uri", required=True)
    pu.set_defaults(func=cmd_uri)

    # verify
    pv = sub.add_parser("verify", help="Verify an OTP code (TOTP or HOTP)")
    sub_v = pv.add_subparsers(dest="verify_type")
    pv.set_defaults(func=cmd_help)

    pvt = sub_v.add_parser("totp", help="Verify a TOTP code")
    _add_key_args(pvt)
    pvt.add_argument("--code", required=True, help="OTP code to verify")
    pvt.add_argument("--window", type=int, default=DEFAULT_SKEW, help="Allowed +/- step window")
    pvt.add_argument("--timestamp", type=int, help="Unix time to verify at (default: now)")
    pvt.set_defaults(func=cmd_verify_totp)

    pvh = sub_v.add_parser("hotp", help="Verify a HOTP code")
    _add_key_args(pvh, with_period=False)
    pvh.add_argument("--code", required=True, help="OTP code to verify")
    pvh.add_argument("--counter", type=int, required=True, help="Current HOTP counter")
    pvh.add_argument("--look-ahead", type=int, default=0, help="Allowed counter look-ahead")
    pvh.set_defaults(func=cmd_verify_hotp)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except OTPError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
