"""Base class for output connectors."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")


class OutputConnector(ABC, Generic[T]):
    """Destination that transformed records are written to.

    Subclasses must implement:
    - connector_type: Identifier (e.g., "json-file", "firestore")
    - supported_type: Record class this connector accepts
    - write(), write_batch(), exists(), is_healthy()
    """

    @property
    @abstractmethod
    def connector_type(self) -> str:
        pass

    @property
    @abstractmethod
    def supported_type(self) -> type:
        pass

    @abstractmethod
    def write(self, record: T) -> None:
        """Write a single record.

        Raises:
            OutputError: If the record could not be written
        """
        pass

    @abstractmethod
    def write_batch(self, records: list[T]) -> None:
        """Write several records, stopping at the first failure."""
        pass

    @abstractmethod
    def exists(self, record_id: str) -> bool:
        """Check if a record with this identifier was already written."""
        pass

    @abstractmethod
    def is_healthy(self) -> bool:
        pass

    def initialize(self) -> None:
        """Prepare the connector before first use."""
        return None

    def shutdown(self) -> None:
        """Release any resources held by the connector."""
        return None
