"""XMODEM sender.

XModem wraps a byte channel and runs the three protocol phases for a single
payload:

  1. negotiate_mode: wait for NAK / 'C' from the receiver
  2. send_blocks:    frame the payload, resend each block until ACKed
  3. send_eot:       send EOT until ACKed

Example:
    port = open_serial("/dev/ttyUSB0", 115200)
    modem = XModem(port, mode=Mode.ONE_K)
    result = modem.send(Path("firmware.bin").read_bytes())
"""

import io
import logging
from typing import BinaryIO

import serial

from common.errors import ChannelError, UnimplementedMode, XModemError
from common.io import write_bytes
from common.protocol import DEFAULT_RETRIES, ByteChannel, ControlByte, Mode
from sender.handshake import negotiate_mode
from sender.shutdown import send_eot
from sender.transfer import ProgressCallback, send_blocks
from session.result import TransferResult
from session.state import TransferSession

logger = logging.getLogger(__name__)

ABORT_BYTES = bytes([ControlByte.CAN, ControlByte.CAN])


class XModem:
    """Sender side of XMODEM-CRC and XMODEM-1K over a byte channel.

    Args:
        port: Channel to the receiver, typically a serial.Serial.
        padding: Fill byte for the final short block (default SUB, 0x1A).
        retries: Consecutive failures tolerated before the transfer is given up.
        timeout_s: Per read/write timeout applied to a serial.Serial port.
            None leaves the port's own timeouts untouched.
        mode: Framing used when the receiver asks for CRC (CRC16 or ONE_K).
        log: Logger receiving protocol events (default: this module's logger).

    Raises:
        UnimplementedMode: If mode is BASIC.
        ValueError: If padding or retries are out of range.
    """

    def __init__(
        self,
        port: ByteChannel,
        padding: int = ControlByte.SUB,
        retries: int = DEFAULT_RETRIES,
        timeout_s: float | None = None,
        mode: Mode = Mode.CRC16,
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        if mode is Mode.BASIC:
            raise UnimplementedMode("8-bit checksum (basic) mode is not implemented")
        if not 0 <= padding <= 0xFF:
            raise ValueError(f"Padding must be a single byte, got {padding}")
        if retries < 0:
            raise ValueError(f"Retries must be >= 0, got {retries}")

        self.port = port
        self.padding = int(padding)
        self.retries = retries
        self.timeout_s = timeout_s
        self.mode = mode
        self.log = log if log is not None else logger

        if timeout_s is not None and isinstance(port, serial.Serial):
            port.timeout = timeout_s
            port.write_timeout = timeout_s

    def send(
        self,
        payload: bytes | bytearray | memoryview | BinaryIO,
        callback: ProgressCallback | None = None,
    ) -> TransferResult:
        """Send payload to the receiver.

        payload may be a bytes-like object or a binary stream. Either every
        block and the final EOT are acknowledged, or an exception is raised
        and the receiver's partial data must be discarded.

        Returns:
            TransferResult with success=True and transfer statistics.

        Every XModemError raised here carries the partial TransferResult
        (blocks acknowledged so far, retransmits, mode) as `result`.

        Raises:
            TransferCanceled: Receiver cancelled, or the retry ceiling was exceeded.
            ChannelError: Channel failure on the last permitted retry.
            UnimplementedMode: Receiver requested 8-bit checksum mode.
        """
        if isinstance(payload, (bytes, bytearray, memoryview)):
            stream: BinaryIO = io.BytesIO(bytes(payload))
        else:
            stream = payload

        session = TransferSession(
            log=self.log,
            preferred_mode=self.mode,
            retries=self.retries,
            timeout_s=self.timeout_s,
            padding=self.padding,
        )
        self.log.info(
            f"Starting transfer (mode={self.mode.value}, retries={self.retries}, "
            f"padding=0x{self.padding:02x})"
        )

        mode = None
        try:
            mode = negotiate_mode(self.port, session)
            send_blocks(self.port, session, stream, callback)
            send_eot(self.port, session)
        except XModemError as e:
            e.result = _result(session, mode, error=e)
            raise

        return _result(session, mode)

    def abort(self) -> None:
        """Cancel the transfer from the sender side by writing CAN CAN.

        Errors are logged and dropped; the receiver may not be listening.
        """
        self.log.info("Aborting transfer (sending CAN CAN)")
        try:
            write_bytes(self.port, ABORT_BYTES)
        except ChannelError as e:
            self.log.debug(f"Abort not delivered: {e}")


def _result(
    session: TransferSession, mode: Mode | None, error: XModemError | None = None
) -> TransferResult:
    """Build the TransferResult for a finished or failed transfer.

    mode is None when negotiation never completed.
    """
    return TransferResult(
        success=error is None,
        mode=mode,
        blocks_sent=session.blocks_sent,
        retransmits=session.retransmits,
        bytes_sent=session.bytes_sent,
        wire_bytes=session.wire_bytes,
        elapsed_s=session.elapsed_s,
        error=error,
    )
