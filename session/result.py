"""Transfer result types for the XMODEM sender.

Contains:
- TransferResult: Outcome and statistics of one transfer
"""

from dataclasses import dataclass

from common.protocol import Mode


@dataclass
class TransferResult:
    """Result from a transfer.

    Attributes:
        success: True if every block and the EOT were acknowledged.
        mode: Negotiated mode, None if negotiation never completed.
        blocks_sent: Number of acknowledged blocks.
        retransmits: Number of block frames written again after NAK/timeout.
        bytes_sent: Payload bytes delivered (excluding padding).
        wire_bytes: Total bytes written to the channel.
        elapsed_s: Total transfer duration in seconds.
        error: Exception that ended the transfer, if it failed.
    """

    success: bool
    mode: Mode | None = None
    blocks_sent: int = 0
    retransmits: int = 0
    bytes_sent: int = 0
    wire_bytes: int = 0
    elapsed_s: float = 0.0
    error: Exception | None = None

    def throughput_baud(self, bits_per_byte: int = 10) -> float:
        """Compute wire throughput in baud (bits/second).

        Args:
            bits_per_byte: Bits per byte including start/stop (default 10 for 8N1).

        Returns:
            Throughput in baud, or 0 if duration is 0.
        """
        if self.elapsed_s <= 0:
            return 0.0
        return (self.wire_bytes / self.elapsed_s) * bits_per_byte

    def throughput_kbps(self) -> float:
        """Compute payload throughput in Kbps (kilobits/second).

        Returns:
            Throughput in Kbps, or 0 if duration is 0.
        """
        if self.elapsed_s <= 0:
            return 0.0
        return (self.bytes_sent * 8 / self.elapsed_s) / 1000
