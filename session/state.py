"""Live state of one XMODEM transfer.

TransferSession is created at the start of XModem.send, passed by reference
through the negotiation, block and termination phases, and dropped when send
returns. Nothing outside the state machine mutates it.
"""

import logging
import time
from dataclasses import dataclass, field

from common.protocol import (
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_S,
    FIRST_SEQUENCE,
    SEQUENCE_MODULUS,
    ControlByte,
    Mode,
)


@dataclass
class TransferSession:
    """Mutable protocol state shared by all transfer phases.

    Attributes:
        log: Logger receiving every transition and error.
        mode: Negotiated framing variant (CRC16 until the receiver says otherwise).
        preferred_mode: Mode selected when the receiver requests CRC ('C').
        sequence: Sequence number of the block being sent.
        error_count: Consecutive failures since the last ACK.
        cancel_flag: True after a single CAN during negotiation.
        retries: Failures tolerated before the transfer is given up.
        timeout_s: Per read/write timeout, informational only.
        padding: Fill byte for a short final block.
        blocks_sent: Blocks acknowledged by the receiver.
        retransmits: Block frames written more than once.
        bytes_sent: Payload bytes carried by acknowledged blocks.
        wire_bytes: Total bytes written to the channel.
        started_at: Monotonic timestamp of session creation.
    """

    log: logging.Logger | logging.LoggerAdapter
    mode: Mode = Mode.CRC16
    preferred_mode: Mode = Mode.CRC16
    sequence: int = FIRST_SEQUENCE
    error_count: int = 0
    cancel_flag: bool = False
    retries: int = DEFAULT_RETRIES
    timeout_s: float | None = DEFAULT_TIMEOUT_S
    padding: int = ControlByte.SUB
    blocks_sent: int = 0
    retransmits: int = 0
    bytes_sent: int = 0
    wire_bytes: int = 0
    started_at: float = field(default_factory=time.monotonic)

    def record_error(self) -> bool:
        """Count a failed exchange. Returns True once the retry ceiling is exceeded."""
        self.error_count += 1
        return self.error_count > self.retries

    def reset_errors(self) -> None:
        self.error_count = 0

    def advance_sequence(self) -> None:
        # Plain modulo: 255 wraps to 0
        self.sequence = (self.sequence + 1) % SEQUENCE_MODULUS

    @property
    def elapsed_s(self) -> float:
        return time.monotonic() - self.started_at
