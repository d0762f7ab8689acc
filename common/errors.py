"""Transfer exceptions for the XMODEM sender.

Contains:
- XModemError: Base class for every transfer failure
- TransferCanceled: Protocol-level abort or retry ceiling exceeded
- ChannelError / ChannelTimeout: Serial read/write failures
- UnimplementedMode: Framing variant this sender cannot produce
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from session.result import TransferResult


class XModemError(Exception):
    """Base class for XMODEM transfer failures.

    XModem.send attaches the partial TransferResult of the failed transfer as
    `result`; it stays None when the error is raised outside a transfer.
    """

    result: "TransferResult | None" = None


class TransferCanceled(XModemError):
    """Raised when the transfer is aborted by the receiver or by the retry ceiling."""

    pass


class ChannelError(XModemError):
    """Raised when the underlying byte channel fails to read or write."""

    pass


class ChannelTimeout(ChannelError):
    """Raised when a read returns no data before the port timeout."""

    pass


class UnimplementedMode(XModemError):
    """Raised when the 8-bit checksum (basic) mode is requested."""

    pass
