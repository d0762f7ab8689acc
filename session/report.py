"""Transfer reporting for the XMODEM sender.

Contains:
- TransferReport: Report after a transfer completes or fails
"""

from dataclasses import dataclass

from common.report import Report
from session.result import TransferResult


@dataclass
class TransferReport(Report):
    """Report after a transfer completes or fails."""

    result: TransferResult

    def print(self) -> None:
        """Print the transfer report."""
        r = self.result
        mode = r.mode.value if r.mode is not None else "none"

        if not r.success:
            print(f"Transfer: FAILED ({r.error})")
            if r.blocks_sent > 0:
                print(
                    f"          ({r.blocks_sent} blocks acknowledged, "
                    f"{r.retransmits} retransmits, mode={mode})"
                )
            return

        print(
            f"Transfer: SUCCESS ({r.bytes_sent} bytes in {r.blocks_sent} blocks, "
            f"{r.retransmits} retransmits, mode={mode})"
        )
        if r.elapsed_s > 0 and r.wire_bytes > 0:
            baud = r.throughput_baud()
            kbps = r.throughput_kbps()
            print(f"Throughput: {baud:,.0f} baud ({kbps:.2f} Kbps) over {r.elapsed_s:.1f}s")

    def success(self) -> bool:
        """Return True if the transfer succeeded."""
        return self.result.success
