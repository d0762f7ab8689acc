"""Serial device setup for the XMODEM sender.

Contains:
- log_device_info: Log information about a serial device
- open_serial: Open and configure a serial port for a transfer
"""

import logging
import os

import serial
import serial.tools.list_ports

from common.protocol import DEFAULT_TIMEOUT_S

logger = logging.getLogger(__name__)


def log_device_info(device: str) -> None:
    """Log what is known about device before it is opened.

    Symlinks such as /dev/serial/by-id/... are resolved before matching
    against the enumerated ports, so the log names the USB bridge actually used.
    """
    real_path = os.path.realpath(device)
    matches = [
        p for p in serial.tools.list_ports.comports() if os.path.realpath(p.device) == real_path
    ]
    if not matches:
        kind = "pty" if real_path.startswith("/dev/pts/") else "not in port list"
        logger.info(f"Device: {device} -> {real_path} ({kind})")
        return

    info = matches[0]
    details = [info.description]
    if info.vid is not None:
        details.append(f"VID:PID {info.vid:04x}:{info.pid:04x}")
    if info.serial_number:
        details.append(f"serial {info.serial_number}")
    logger.info(f"Device: {device} -> {info.device} ({', '.join(details)})")


def open_serial(
    device: str,
    baudrate: int,
    rtscts: bool = False,
    timeout_s: float = DEFAULT_TIMEOUT_S,
) -> serial.Serial:
    """Open a serial port as an 8N1 byte channel.

    XON/XOFF stays off: XMODEM payloads are binary and may contain 0x11/0x13.
    """
    log_device_info(device)
    ser = serial.Serial(
        port=device,
        baudrate=baudrate,
        bytesize=serial.EIGHTBITS,
        parity=serial.PARITY_NONE,
        stopbits=serial.STOPBITS_ONE,
        xonxoff=False,
        rtscts=rtscts,
        timeout=timeout_s,
        write_timeout=timeout_s,
    )
    ser.reset_output_buffer()
    logger.debug(
        f"Serial port: baudrate={ser.baudrate}, rtscts={ser.rtscts}, timeout={ser.timeout}s"
    )
    return ser
