#!/usr/bin/env python3
"""
otp_cli.py — CLI wrapper cho totp_core.

Cung cấp các subcommand:
- secret : tạo secret Base32 mới
- code   : hiển thị mã TOTP hiện tại (hoặc theo dõi liên tục với --watch)
- hotp   : sinh mã HOTP cho một counter
- verify : xác minh mã OTP (TOTP/HOTP)
- uri    : in ra otpauth:// URI (và URL ảnh QR nếu cần)

Secret đọc từ --secret hoặc biến môi trường TOTP_SECRET; không bao giờ ghi ra
file.

eg..:
    totp-tool secret --length 32
    totp-tool code --secret JBSWY3DPEHPK3PXP --digits 8 --period 60
    totp-tool verify totp --code 123456 --window 2
    totp-tool verify hotp --code 755224 --counter 0 --look-ahead 3
    totp-tool uri --account alice@example.com --issuer MyService --qr
"""

import argparse
import logging
import os
import sys
import time

from . import (
    DEFAULT_DIGITS,
    DEFAULT_SECRET_LENGTH,
    DEFAULT_TIME_STEP,
    DEFAULT_WINDOW,
    HashAlgorithm,
    OTPError,
    OTPOptions,
    format_hotp_uri,
    format_otpauth_uri,
    generate_code,
    generate_secret,
    hotp,
    qr_code_url,
    seconds_remaining,
    verify_code,
    verify_hotp,
)
from .options import now_millis
from .otp_core import decode_secret

logger = logging.getLogger(__name__)

SECRET_ENV = "TOTP_SECRET"

EXIT_OK = 0
EXIT_INVALID_CODE = 1
EXIT_ERROR = 2


# --- CLI command handlers ---
def cmd_secret(args) -> int:
    print(generate_secret(args.length))
    return EXIT_OK


def cmd_code(args) -> int:
    options = _otp_options(args)
    if not args.watch:
        print(generate_code(args.secret, options))
        return EXIT_OK

    print(f"Press Ctrl+C to quit. Generating {args.digits}-digit TOTP every {args.period}s...\n")
    last_code = None
    try:
        while True:
            now = now_millis()
            code = generate_code(args.secret, options, timestamp=now)
            remaining = seconds_remaining(args.period, now)
            if code != last_code:
                print(f"TOTP: {code}  (valid ~{remaining:2d}s)")
                last_code = code
            else:
                print(f".. {remaining:2d}s left", end="\r", flush=True)
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nBye.")
    return EXIT_OK


def cmd_hotp(args) -> int:
    code = hotp(decode_secret(args.secret), args.counter, args.digits, args.algorithm)
    print(f"HOTP(counter={args.counter}): {code}")
    return EXIT_OK


def cmd_verify_totp(args) -> int:
    ok = verify_code(args.code, args.secret, _otp_options(args), window=args.window)
    if ok:
        print("[+] TOTP code is VALID")
        return EXIT_OK
    print("[-] TOTP code is INVALID")
    return EXIT_INVALID_CODE


def cmd_verify_hotp(args) -> int:
    ok, next_counter = verify_hotp(
        args.code,
        args.secret,
        args.counter,
        look_ahead=args.look_ahead,
        digits=args.digits,
        algorithm=args.algorithm,
    )
    if ok:
        print(f"[+] HOTP code is VALID (next counter = {next_counter})")
        return EXIT_OK
    print("[-] HOTP code is INVALID")
    return EXIT_INVALID_CODE


def cmd_uri(args) -> int:
    if args.hotp_counter is None:
        uri = format_otpauth_uri(
            args.account, args.issuer, args.secret,
            digits=args.digits, period=args.period, algorithm=args.algorithm,
        )
    else:
        uri = format_hotp_uri(
            args.account, args.issuer, args.secret,
            counter=args.hotp_counter, digits=args.digits, algorithm=args.algorithm,
        )
    print(uri)
    if args.qr:
        print(qr_code_url(uri, args.qr_size))
    return EXIT_OK


def cmd_help(args) -> int:
    print("'totp-tool -h' for help.")
    return EXIT_ERROR


def _otp_options(args) -> OTPOptions:
    return OTPOptions(
        time_step=args.period,
        digits=args.digits,
        timestamp=args.timestamp,
        algorithm=args.algorithm,
    )


def _algorithm(value: str) -> HashAlgorithm:
    return HashAlgorithm.parse(value)


# --- Argparse builder ---
def _add_secret(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--secret",
        default=os.environ.get(SECRET_ENV),
        help=f"Base32 secret (default: ${SECRET_ENV})",
    )


def _add_code_options(p: argparse.ArgumentParser, period: bool = True) -> None:
    p.add_argument("--digits", type=int, default=DEFAULT_DIGITS, help="Number of OTP digits")
    p.add_argument("--algorithm", type=_algorithm, default=HashAlgorithm.SHA1, help="SHA-1, SHA-256 or SHA-512")
    if period:
        p.add_argument("--period", type=int, default=DEFAULT_TIME_STEP, help="TOTP time step (seconds)")
        p.add_argument("--timestamp", type=int, help="Milliseconds since the epoch (default: now)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="totp-tool", description="TOTP/HOTP generator and verifier")
    p.add_argument("--verbose", action="store_true", help="Debug logging on stderr")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    # secret
    ps = sub.add_parser("secret", help="Generate a random Base32 secret")
    ps.add_argument("--length", type=int, default=DEFAULT_SECRET_LENGTH, help="Number of Base32 characters")
    ps.set_defaults(func=cmd_secret)

    # code
    pc = sub.add_parser("code", help="Print the TOTP code")
    _add_secret(pc)
    _add_code_options(pc)
    pc.add_argument("--watch", action="store_true", help="Keep printing codes as they roll over")
    pc.set_defaults(func=cmd_code)

    # hotp
    ph = sub.add_parser("hotp", help="Print the HOTP code for a specific counter")
    _add_secret(ph)
    ph.add_argument("--counter", type=int, required=True)
    _add_code_options(ph, period=False)
    ph.set_defaults(func=cmd_hotp)

    # verify
    pv = sub.add_parser("verify", help="Verify an OTP code (TOTP or HOTP)")
    sub_v = pv.add_subparsers(dest="verify_type")
    pv.set_defaults(func=cmd_help)

    pvt = sub_v.add_parser("totp", help="Verify a TOTP code")
    _add_secret(pvt)
    pvt.add_argument("--code", required=True, help="OTP code to verify")
    _add_code_options(pvt)
    pvt.add_argument("--window", type=int, default=DEFAULT_WINDOW, help="Allowed +/- step window")
    pvt.set_defaults(func=cmd_verify_totp)

    pvh = sub_v.add_parser("hotp", help="Verify a HOTP code")
    _add_secret(pvh)
    pvh.add_argument("--code", required=True, help="OTP code to verify")
    pvh.add_argument("--counter", type=int, required=True, help="Current HOTP counter")
    pvh.add_argument("--look-ahead", type=int, default=1, help="Allowed counter look-ahead")
    _add_code_options(pvh, period=False)
    pvh.set_defaults(func=cmd_verify_hotp)

    # uri
    pu = sub.add_parser("uri", help="Print the otpauth:// URI")
    _add_secret(pu)
    pu.add_argument("--account", default="user@example", help="Account label for otpauth URI")
    pu.add_argument("--issuer", default="otp-tool", help="Issuer label for otpauth URI")
    pu.add_argument("--digits", type=int, default=DEFAULT_DIGITS)
    pu.add_argument("--period", type=int, default=DEFAULT_TIME_STEP)
    pu.add_argument("--algorithm", type=_algorithm, default=HashAlgorithm.SHA1)
    pu.add_argument("--hotp-counter", type=int, help="Emit an otpauth://hotp/ URI starting at this counter")
    pu.add_argument("--qr", action="store_true", help="Also print a QR code image URL")
    pu.add_argument("--qr-size", type=int, default=256)
    pu.set_defaults(func=cmd_uri)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if hasattr(args, "secret") and not args.secret:
        parser.error(f"a secret is required (--secret or ${SECRET_ENV})")
    try:
        return args.func(args)
    except OTPError as e:
        logger.debug("%s failed", args.cmd, exc_info=True)
        print(f"[!] {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
