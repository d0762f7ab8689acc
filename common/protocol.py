"""Protocol definitions for the XMODEM sender.

Contains:
- ControlByte enum for single-byte protocol signals
- Mode enum for the negotiated framing variant
- ByteChannel Protocol for type checking
- Retry, timeout and progress constants
- Logging configuration
"""

import logging
import os
from enum import Enum, IntEnum
from typing import Protocol

# TRACE logging level (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Progress logging interval in blocks (configurable via envvar)
LOG_PROGRESS_INTERVAL = int(os.environ.get("XMODEM_LOG_INTERVAL", "64"))


class ControlByte(IntEnum):
    """Control bytes recognised on the wire."""

    SOH = 0x01  # 128-byte block header
    STX = 0x02  # 1024-byte block header
    EOT = 0x04
    ACK = 0x06
    NAK = 0x15
    CAN = 0x18
    CRC = 0x43  # 'C', receiver requests CRC-16 framing
    SUB = 0x1A  # default padding for the final block


class Mode(Enum):
    """Framing variant negotiated with the receiver."""

    BASIC = "basic"  # 128-byte blocks, 8-bit checksum (not supported)
    CRC16 = "crc16"  # 128-byte blocks, CRC-16
    ONE_K = "1k"  # 1024-byte blocks, CRC-16

    @property
    def block_size(self) -> int:
        return BLOCK_SIZE_1K if self is Mode.ONE_K else BLOCK_SIZE

    @property
    def header(self) -> ControlByte:
        return ControlByte.STX if self is Mode.ONE_K else ControlByte.SOH


class ByteChannel(Protocol):
    """Protocol for the byte channel the sender talks over."""

    def write(self, data: bytes, /) -> int | None: ...
    def read(self, size: int = ..., /) -> bytes: ...


BLOCK_SIZE = 128
BLOCK_SIZE_1K = 1024
CHECKSUM_SIZE = 2

# Sequence numbers are a single byte
SEQUENCE_MODULUS = 256
FIRST_SEQUENCE = 1

# Default retry and timing constants
DEFAULT_RETRIES = 10  # Consecutive failures tolerated before giving up
DEFAULT_TIMEOUT_S = 10.0  # Per read/write on the serial port
DEFAULT_BAUDRATE = 115200
