"""Reporting abstractions for the XMODEM sender.

Contains:
- Report ABC: Base class for all reports
"""

from abc import ABC, abstractmethod


class Report(ABC):
    """Abstract base class for transfer reports."""

    @abstractmethod
    def print(self) -> None:
        """Print the report to stdout."""
        pass

    @abstractmethod
    def success(self) -> bool:
        """Return True if the report indicates success."""
        pass
