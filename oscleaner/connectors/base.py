"""
Abstract base class for cluster clients.

This module defines the ClusterClient interface that the cleanup engine uses
to list and delete indices. Implementations exist for the Aiven REST API and
for an in-memory cluster used in tests and offline runs.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional

from oscleaner.retention.models import IndexInfo


class ClusterClientError(RuntimeError):
    """Raised when the cluster API rejects or fails a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ClusterClient(ABC):
    """
    Abstract base class for cluster clients.

    All cluster-specific implementations must inherit from this class
    and implement all abstract methods.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

    @abstractmethod
    async def connect(self) -> bool:
        """
        Open the connection to the cluster API.

        Returns:
            True if the connection is usable, False otherwise
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection to the cluster API."""
        pass

    @abstractmethod
    async def list_indices(self, service: str) -> List[IndexInfo]:
        """
        List the indices of a service.

        Args:
            service: Service name

        Returns:
            Index metadata in the order reported by the cluster

        Raises:
            ClusterClientError: If the listing fails
        """
        pass

    @abstractmethod
    async def delete_index(self, service: str, index_name: str) -> None:
        """
        Delete an index.

        Args:
            service: Service name
            index_name: Name of the index to delete

        Raises:
            ClusterClientError: If the deletion fails
        """
        pass

    async def __aenter__(self) -> "ClusterClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()
