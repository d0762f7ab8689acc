"""Serial I/O helpers for the XMODEM sender.

Contains:
- read_byte: Read a single response byte
- write_bytes: Write a buffer to the channel

Both translate pyserial failures into ChannelError so the state machine only
has to handle one exception family.
"""

import serial

from common.errors import ChannelError, ChannelTimeout
from common.protocol import ByteChannel


def read_byte(port: ByteChannel) -> int:
    """Read one byte from the channel.

    Raises:
        ChannelTimeout: If no byte arrived before the port timeout.
        ChannelError: If the port reported a read failure.
    """
    try:
        data = port.read(1)
    except (serial.SerialException, OSError) as e:
        raise ChannelError(f"Read failed: {e}") from e

    if not data:
        raise ChannelTimeout("Timeout waiting for response byte")
    return data[0]


def write_bytes(port: ByteChannel, data: bytes) -> None:
    """Write data to the channel.

    Short writes are not retried here; any exception is a failed write.

    Raises:
        ChannelError: If the port reported a write failure or write timeout.
    """
    try:
        port.write(data)
    except (serial.SerialException, OSError) as e:
        raise ChannelError(f"Write failed: {e}") from e
