"""Sender runner for the XMODEM sender.

Contains run_sender() which loads a file, opens the serial port and performs
the transfer, returning an exit code based on the result.
"""

import logging
from enum import IntEnum
from pathlib import Path

from common.device import open_serial
from common.errors import ChannelError, UnimplementedMode, XModemError
from common.protocol import DEFAULT_RETRIES, DEFAULT_TIMEOUT_S, ControlByte, Mode
from sender.modem import XModem
from session.report import TransferReport
from session.result import TransferResult

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Exit codes for sender operations."""

    SUCCESS = 0  # Every block and EOT acknowledged
    OPEN_FAILED = 1  # Serial port could not be opened
    # 2 is left to argparse usage errors
    FILE_ERROR = 3  # Payload file could not be read
    TRANSFER_CANCELED = 4  # Receiver cancelled or retry ceiling exceeded
    CHANNEL_ERROR = 5  # Serial I/O failed on the last retry
    UNSUPPORTED_MODE = 6  # Receiver requested 8-bit checksum mode
    INTERRUPTED = 130  # Ctrl-C


def _exit_code_for(error: XModemError) -> ExitCode:
    if isinstance(error, UnimplementedMode):
        return ExitCode.UNSUPPORTED_MODE
    if isinstance(error, ChannelError):
        return ExitCode.CHANNEL_ERROR
    return ExitCode.TRANSFER_CANCELED


def run_sender(
    device: str,
    baudrate: int,
    path: str,
    retries: int = DEFAULT_RETRIES,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    one_k: bool = False,
    padding: int = ControlByte.SUB,
    rtscts: bool = False,
) -> int:
    """Run sender: load file, open port, transfer. Returns exit code.

    Any transfer error is fatal: CAN CAN is sent to the receiver and a
    non-zero exit code is returned.
    """
    try:
        payload = Path(path).read_bytes()
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        return ExitCode.FILE_ERROR

    try:
        ser = open_serial(device, baudrate, rtscts=rtscts, timeout_s=timeout_s)
    except Exception as e:
        logger.error(f"Failed to open serial port: {e}")
        return ExitCode.OPEN_FAILED

    try:
        mode = Mode.ONE_K if one_k else Mode.CRC16
        modem = XModem(ser, padding=padding, retries=retries, timeout_s=timeout_s, mode=mode)

        logger.info(f"Sending file: {path} ({len(payload)} bytes)")
        try:
            result = modem.send(payload)
        except KeyboardInterrupt:
            logger.warning("Interrupted, cancelling transfer")
            modem.abort()
            return ExitCode.INTERRUPTED
        except XModemError as e:
            logger.error(f"Transfer failed: {e}")
            modem.abort()
            failed = e.result if e.result is not None else TransferResult(success=False, error=e)
            TransferReport(result=failed).print()
            return _exit_code_for(e)

        TransferReport(result=result).print()
        logger.info("File sent")
        return ExitCode.SUCCESS

    finally:
        ser.close()
        logger.info(f"Closed {device}")
