"""Sender package for the XMODEM sender.

Contains the sender-side protocol phases and the XModem facade:
- handshake: negotiate_mode
- transfer: send_block, send_blocks
- shutdown: send_eot
- modem: XModem (send, abort)

Note: run_sender and ExitCode are not exported here. Import directly from
sender.runner when needed.
"""

from sender.handshake import negotiate_mode
from sender.modem import XModem
from sender.shutdown import send_eot
from sender.transfer import send_block, send_blocks

__all__ = [
    "XModem",
    "negotiate_mode",
    "send_block",
    "send_blocks",
    "send_eot",
]
