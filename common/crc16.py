"""CRC-16/XMODEM checksum.

Polynomial 0x1021, no reflection, no final XOR. The initial register value is
supplied by the caller, which lets a CRC be continued over several chunks:

    crc(b"world", crc(b"hello")) == crc(b"helloworld")
"""

import binascii

MASK = 0xFFFF


def crc(data: bytes, seed: int = 0) -> int:
    """Compute CRC-16/XMODEM over data, starting from seed."""
    return binascii.crc_hqx(data, seed & MASK)


def crc_string(text: str | bytes, seed: int = 0) -> int:
    """Compute CRC-16/XMODEM over the UTF-8 bytes of text."""
    if isinstance(text, str):
        text = text.encode("utf-8")
    return crc(text, seed)
