"""
Sink interface for the finished Row Collection.
"""
from abc import ABC, abstractmethod
from typing import Sequence

from core.schema import CanonicalRow


class RowSink(ABC):
    """Remote tabular store that accepts appended rows."""

    @abstractmethod
    def append(self, rows: Sequence[CanonicalRow]) -> int:
        """
        Append rows to the store.

        Args:
            rows: Canonical rows in output order

        Returns:
            Number of rows appended

        Raises:
            SinkError: If the append fails
        """
