#!/usr/bin/env python3
"""Send a file to a serial receiver using XMODEM-CRC or XMODEM-1K."""

import argparse
import logging
import os
import sys

from common.protocol import DEFAULT_RETRIES, DEFAULT_TIMEOUT_S, TRACE, ControlByte
from sender.runner import run_sender


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.environ.get(name, str(default)))


def _byte_value(text: str) -> int:
    """Parse a byte value given as decimal, hex (0x1a) or octal (0o32)."""
    value = int(text, 0)
    if not 0 <= value <= 0xFF:
        raise argparse.ArgumentTypeError(f"padding must be 0-255, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    retries = _env_int("XMODEM_RETRIES", DEFAULT_RETRIES)
    timeout_s = _env_float("XMODEM_TIMEOUT_S", DEFAULT_TIMEOUT_S)

    parser = argparse.ArgumentParser(
        description="Send a file over a serial port using XMODEM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s /dev/ttyUSB0 115200 firmware.bin        XMODEM-CRC, 128-byte blocks
  %(prog)s -k /dev/ttyUSB0 115200 firmware.bin     XMODEM-1K, 1024-byte blocks
  %(prog)s -r 20 -t 3 /dev/ttyAMA0 9600 image.bin  20 retries, 3s timeout

Environment:
  XMODEM_RETRIES, XMODEM_TIMEOUT_S   defaults for -r and -t
  XMODEM_LOG_INTERVAL                blocks between progress log lines
""",
    )
    parser.add_argument("device", help="Serial device path (e.g., /dev/ttyUSB0)")
    parser.add_argument("baudrate", type=int, help="Baud rate (e.g., 115200)")
    parser.add_argument("file", help="File to send")
    parser.add_argument(
        "-r",
        "--retries",
        type=int,
        default=retries,
        help=f"Consecutive failures tolerated before giving up (default: {retries})",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=timeout_s,
        help=f"Per read/write timeout in seconds (default: {timeout_s})",
    )
    parser.add_argument(
        "-k",
        "--1k",
        dest="one_k",
        action="store_true",
        help="Use 1024-byte blocks when the receiver requests CRC",
    )
    parser.add_argument(
        "-p",
        "--padding",
        type=_byte_value,
        default=int(ControlByte.SUB),
        help="Padding byte for the final block (default: 0x1a)",
    )
    parser.add_argument(
        "--rtscts", action="store_true", help="Enable RTS/CTS hardware flow control"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Log every protocol step (TRACE)"
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only log warnings and errors"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.retries < 0:
        parser.error(f"retries must be >= 0, got {args.retries}")

    if args.verbose:
        level = TRACE
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level)

    return run_sender(
        args.device,
        args.baudrate,
        args.file,
        retries=args.retries,
        timeout_s=args.timeout,
        one_k=args.one_k,
        padding=args.padding,
        rtscts=args.rtscts,
    )


if __name__ == "__main__":
    sys.exit(main())
