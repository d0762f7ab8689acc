"""Sender shutdown (EOT/ACK handshake)."""

from common.errors import ChannelError, TransferCanceled
from common.io import read_byte, write_bytes
from common.protocol import ByteChannel, ControlByte
from session.state import TransferSession

EOT_BYTES = bytes([ControlByte.EOT])


def send_eot(port: ByteChannel, session: TransferSession) -> None:
    """Send EOT until the receiver acknowledges it.

    Raises:
        ChannelError: Channel failure on the last permitted retry.
        TransferCanceled: Retry ceiling exceeded on unexpected responses.
    """
    log = session.log

    while True:
        log.info("sending EOT, awaiting ACK")
        try:
            write_bytes(port, EOT_BYTES)
            session.wire_bytes += len(EOT_BYTES)
            char = read_byte(port)
        except ChannelError as e:
            log.error(f"Error during EOT exchange: {e}")
            if session.record_error():
                log.error("Too many errors, aborting transfer")
                raise
            continue

        if char == ControlByte.ACK:
            log.info("ACK received, transmission successful")
            return

        log.error(f"send error: expected ACK, got 0x{char:02x}")
        if session.record_error():
            log.error("EOT was not ACKd, aborting transfer")
            raise TransferCanceled(f"EOT not acknowledged after {session.error_count} attempts")
