"""Block framing for the XMODEM sender.

A block on the wire is:
  [header][sequence][255 - sequence][payload][CRC-16 high][CRC-16 low]

The header is SOH for 128-byte blocks and STX for 1024-byte blocks. The
payload always has the full block size; a short final chunk is padded on the
right. The CRC covers the padded payload only.
"""

from dataclasses import dataclass

from common.crc16 import crc
from common.errors import UnimplementedMode
from common.protocol import CHECKSUM_SIZE, SEQUENCE_MODULUS, ControlByte, Mode


@dataclass(frozen=True)
class Block:
    """One outbound frame. Reused byte-for-byte on retransmission."""

    header: ControlByte
    sequence: int
    payload: bytes
    checksum: int

    @property
    def complement(self) -> int:
        return 0xFF - self.sequence

    @property
    def header_bytes(self) -> bytes:
        return bytes([self.header, self.sequence, self.complement])

    @property
    def checksum_bytes(self) -> bytes:
        return self.checksum.to_bytes(CHECKSUM_SIZE, "big")

    @property
    def frame(self) -> bytes:
        """Full wire representation of the block."""
        return self.header_bytes + self.payload + self.checksum_bytes


def make_block(mode: Mode, sequence: int, data: bytes, padding: int) -> Block:
    """Build a block for mode, padding data up to the mode's block size.

    Raises:
        UnimplementedMode: If mode is BASIC.
        ValueError: If data is longer than one block.
    """
    if mode is Mode.BASIC:
        raise UnimplementedMode("8-bit checksum (basic) mode is not implemented")

    block_size = mode.block_size
    if len(data) > block_size:
        raise ValueError(f"Block data too long: {len(data)} bytes, max {block_size}")

    payload = bytes(data) + bytes([padding]) * (block_size - len(data))
    return Block(
        header=mode.header,
        sequence=sequence % SEQUENCE_MODULUS,
        payload=payload,
        checksum=crc(payload),
    )
