"""Sender-side mode negotiation.

The receiver opens the transfer by repeatedly sending a single byte:
  NAK  request 128-byte blocks with an 8-bit checksum (basic mode)
  'C'  request CRC-16 framing (128 or 1024-byte blocks, sender's choice)
  EOT  nothing to receive, give up
  CAN  cancel; only two in a row count, a lone CAN is treated as line noise
"""

from common.errors import ChannelError, TransferCanceled
from common.io import read_byte
from common.protocol import TRACE, ByteChannel, ControlByte, Mode
from session.state import TransferSession


def negotiate_mode(port: ByteChannel, session: TransferSession) -> Mode:
    """Wait for the receiver to request a mode and record it on the session.

    Returns the negotiated Mode.
    Raises TransferCanceled on EOT, CAN CAN or when the retry ceiling is exceeded.
    """
    log = session.log
    log.debug(f"Waiting for receiver to request a mode (retries={session.retries})")

    while True:
        try:
            char = read_byte(port)
        except ChannelError as e:
            log.debug(f"No mode request yet: {e}")
            if session.record_error():
                log.error(f"send error: error_count reached {session.retries}, aborting")
                raise TransferCanceled(
                    f"No mode request after {session.error_count} attempts"
                ) from e
            continue

        match char:
            case ControlByte.NAK:
                log.log(TRACE, "standard checksum requested (NAK)")
                session.mode = Mode.BASIC
                return session.mode
            case ControlByte.CRC:
                log.log(TRACE, f"16-bit CRC requested (CRC), using {session.preferred_mode.value}")
                session.mode = session.preferred_mode
                return session.mode
            case ControlByte.CAN:
                if session.cancel_flag:
                    log.error("Transmission canceled: received CAN CAN at start-sequence")
                    raise TransferCanceled("Receiver sent CAN CAN during negotiation")
                log.debug("cancellation at start-sequence, waiting for a second CAN")
                session.cancel_flag = True
            case ControlByte.EOT:
                log.error("Transmission canceled: received EOT at start-sequence")
                raise TransferCanceled("Receiver sent EOT during negotiation")
            case _:
                session.cancel_flag = False
                log.debug(f"Expected NAK, CRC, CAN or EOT, got 0x{char:02x}")
                if session.record_error():
                    log.error(f"send error: error_count reached {session.retries}, aborting")
                    raise TransferCanceled(
                        f"No valid mode request after {session.error_count} attempts"
                    )
