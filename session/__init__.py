"""Transfer session package for the XMODEM sender.

This package holds the per-transfer state and its outcome:
- TransferSession: mutable protocol state shared by all phases
- TransferResult: statistics of a finished transfer
- TransferReport: printable summary of a TransferResult
"""

from session.report import TransferReport
from session.result import TransferResult
from session.state import TransferSession

__all__ = [
    "TransferReport",
    "TransferResult",
    "TransferSession",
]
