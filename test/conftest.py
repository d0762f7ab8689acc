"""pytest configuration and fixtures for the XMODEM sender tests.

Provides:
- ScriptedPort: Mock serial port replaying a script of receiver responses
- port / log fixtures
- pty_pair fixture for integration tests against a real pyserial port
- Markers for unit vs integration tests
"""

import logging
import os
import pty
import sys
from collections.abc import Generator, Iterable

import pytest
import serial

SOH = 0x01
STX = 0x02
EOT = 0x04


class ScriptedPort:
    """Mock serial port for unit testing.

    Each read() consumes the next scripted response:
    - int: a single response byte
    - bytes: returned as-is (truncated to the requested size)
    - None: a read timeout (empty bytes)
    - exception instance: raised from read() (KeyboardInterrupt included)

    Once the script is exhausted every read times out. Writes are recorded in
    order; write calls whose index is in write_errors raise SerialException
    instead of being recorded.
    """

    def __init__(
        self,
        responses: Iterable[int | bytes | None | BaseException] = (),
        write_errors: Iterable[int] = (),
    ) -> None:
        self._responses = iter(responses)
        self._write_errors = set(write_errors)
        self.writes: list[bytes] = []
        self.write_calls = 0
        self.reads = 0
        self.closed = False

    def write(self, data: bytes, /) -> int:
        index = self.write_calls
        self.write_calls += 1
        if index in self._write_errors:
            raise serial.SerialException(f"injected write failure #{index}")
        self.writes.append(bytes(data))
        return len(data)

    def read(self, size: int = 1, /) -> bytes:
        self.reads += 1
        item = next(self._responses, None)
        if item is None:
            return b""
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, int):
            return bytes([item])
        return item[:size]

    def close(self) -> None:
        self.closed = True

    def frames(self) -> list[bytes]:
        """Reassemble written blocks (header + data + checksum writes) into frames."""
        frames = []
        i = 0
        while i < len(self.writes):
            chunk = self.writes[i]
            if len(chunk) == 3 and chunk[0] in (SOH, STX) and i + 2 < len(self.writes):
                frames.append(chunk + self.writes[i + 1] + self.writes[i + 2])
                i += 3
            else:
                i += 1
        return frames

    def eot_count(self) -> int:
        return sum(1 for chunk in self.writes if chunk == bytes([EOT]))


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test (requires pty)")


@pytest.fixture
def make_port() -> type[ScriptedPort]:
    """Return the ScriptedPort class so tests can build ports with their own script."""
    return ScriptedPort


@pytest.fixture
def log() -> logging.Logger:
    """Logger injected into sessions under test."""
    return logging.getLogger("test.xmodem")


@pytest.fixture
def pty_pair() -> Generator[tuple[int, serial.Serial], None, None]:
    """Create a pty pair with a pyserial port on the slave side.

    Yields (master_fd, serial_port). The master fd plays the receiver.
    """
    if sys.platform not in ("linux", "darwin"):
        pytest.skip("pty fixture requires Linux/macOS")

    master_fd, slave_fd = pty.openpty()
    slave_name = os.ttyname(slave_fd)
    os.close(slave_fd)
    ser = serial.Serial(
        slave_name,
        baudrate=115200,
        timeout=2.0,
        write_timeout=2.0,
        xonxoff=False,
        rtscts=False,
    )
    try:
        yield master_fd, ser
    finally:
        if ser.is_open:
            ser.close()
        os.close(master_fd)
