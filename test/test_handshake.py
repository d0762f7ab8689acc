"""Unit tests for mode negotiation."""

import logging

import pytest
import serial

from common.errors import ChannelError, ChannelTimeout, TransferCanceled
from common.protocol import ControlByte, Mode
from sender.handshake import negotiate_mode
from session.state import TransferSession

NAK = ControlByte.NAK
CRC = ControlByte.CRC
CAN = ControlByte.CAN
EOT = ControlByte.EOT


@pytest.mark.unit
class TestNegotiateMode:
    """Tests for negotiate_mode()."""

    def test_nak_selects_basic(self, make_port, log: logging.Logger) -> None:
        session = TransferSession(log=log)
        assert negotiate_mode(make_port([NAK]), session) is Mode.BASIC
        assert session.mode is Mode.BASIC

    def test_crc_selects_crc16(self, make_port, log: logging.Logger) -> None:
        session = TransferSession(log=log)
        assert negotiate_mode(make_port([CRC]), session) is Mode.CRC16

    def test_crc_selects_preferred_one_k(self, make_port, log: logging.Logger) -> None:
        session = TransferSession(log=log, preferred_mode=Mode.ONE_K)
        assert negotiate_mode(make_port([CRC]), session) is Mode.ONE_K

    def test_does_not_write(self, make_port, log: logging.Logger) -> None:
        port = make_port([CRC])
        negotiate_mode(port, TransferSession(log=log))
        assert port.writes == []

    def test_single_can_is_ignored(self, make_port, log: logging.Logger) -> None:
        session = TransferSession(log=log)
        assert negotiate_mode(make_port([CAN, CRC]), session) is Mode.CRC16
        assert session.cancel_flag is True
        assert session.error_count == 0

    def test_double_can_cancels(self, make_port, log: logging.Logger) -> None:
        port = make_port([CAN, CAN, CRC])
        with pytest.raises(TransferCanceled):
            negotiate_mode(port, TransferSession(log=log))
        assert port.reads == 2

    def test_can_separated_by_noise_does_not_cancel(self, make_port, log: logging.Logger) -> None:
        session = TransferSession(log=log)
        assert negotiate_mode(make_port([CAN, 0x00, CAN, CRC]), session) is Mode.CRC16
        assert session.error_count == 1

    def test_can_separated_by_timeout_still_cancels(self, make_port, log: logging.Logger) -> None:
        with pytest.raises(TransferCanceled):
            negotiate_mode(make_port([CAN, None, CAN]), TransferSession(log=log))

    def test_eot_cancels_immediately(self, make_port, log: logging.Logger) -> None:
        port = make_port([EOT, CRC])
        with pytest.raises(TransferCanceled):
            negotiate_mode(port, TransferSession(log=log))
        assert port.reads == 1

    def test_noise_then_crc(self, make_port, log: logging.Logger) -> None:
        session = TransferSession(log=log, retries=3)
        assert negotiate_mode(make_port([0x41, 0x00, None, CRC]), session) is Mode.CRC16
        assert session.error_count == 3

    def test_garbage_exceeds_ceiling(self, make_port, log: logging.Logger) -> None:
        port = make_port([0x00] * 10)
        with pytest.raises(TransferCanceled):
            negotiate_mode(port, TransferSession(log=log, retries=2))
        assert port.reads == 3

    def test_timeouts_exceed_ceiling(self, make_port, log: logging.Logger) -> None:
        port = make_port([])
        with pytest.raises(TransferCanceled) as exc_info:
            negotiate_mode(port, TransferSession(log=log, retries=2))
        assert port.reads == 3
        assert isinstance(exc_info.value.__cause__, ChannelTimeout)

    def test_read_errors_exceed_ceiling(self, make_port, log: logging.Logger) -> None:
        errors = [serial.SerialException("device disconnected")] * 2
        with pytest.raises(TransferCanceled) as exc_info:
            negotiate_mode(make_port(errors), TransferSession(log=log, retries=1))
        assert isinstance(exc_info.value.__cause__, ChannelError)

    def test_logs_requested_mode(self, make_port, log: logging.Logger, caplog) -> None:
        caplog.set_level(1, logger=log.name)
        negotiate_mode(make_port([CRC]), TransferSession(log=log))
        assert any("16-bit CRC requested" in r.getMessage() for r in caplog.records)
