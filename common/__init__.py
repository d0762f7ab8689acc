"""Common modules for the XMODEM sender.

This package contains code shared by the protocol phases:
- protocol: ControlByte and Mode enums, constants, ByteChannel Protocol
- crc16: CRC-16/XMODEM checksum
- block: Block framing
- errors: Transfer exceptions
- io: Channel I/O helpers (read_byte, write_bytes)
- device: Serial device setup
- report: Reporting abstractions
"""

from common.block import Block, make_block
from common.crc16 import crc, crc_string
from common.errors import (
    ChannelError,
    ChannelTimeout,
    TransferCanceled,
    UnimplementedMode,
    XModemError,
)
from common.protocol import (
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_S,
    ByteChannel,
    ControlByte,
    Mode,
)

__all__ = [
    # Protocol
    "ByteChannel",
    "ControlByte",
    "Mode",
    "DEFAULT_RETRIES",
    "DEFAULT_TIMEOUT_S",
    # Framing
    "Block",
    "crc",
    "crc_string",
    "make_block",
    # Exceptions
    "ChannelError",
    "ChannelTimeout",
    "TransferCanceled",
    "UnimplementedMode",
    "XModemError",
]
