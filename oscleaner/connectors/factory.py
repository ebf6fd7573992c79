"""
Cluster client factory.

This module creates cluster clients by type name so the CLI can switch
between the Aiven API and an offline listing.
"""

from typing import Any, Dict, List, Type

from oscleaner.connectors.base import ClusterClient
from oscleaner.connectors.aiven import AivenClusterClient
from oscleaner.connectors.memory import InMemoryClusterClient


class ClusterClientFactory:
    """Factory for creating cluster clients."""

    _clients: Dict[str, Type[ClusterClient]] = {
        "aiven": AivenClusterClient,
        "memory": InMemoryClusterClient,
    }

    @classmethod
    def create_client(cls, client_type: str, config: Any = None) -> ClusterClient:
        """
        Create a cluster client instance.

        Args:
            client_type: Type of client to create ('aiven' or 'memory')
            config: Settings for the client. For 'memory' this is an optional
                path to a JSON listing.

        Raises:
            ValueError: If client_type is not supported
        """
        if client_type not in cls._clients:
            available = ", ".join(cls._clients.keys())
            raise ValueError(f"Unknown client type: {client_type}. Available: {available}")

        if client_type == "memory":
            return InMemoryClusterClient.from_file(config) if config else InMemoryClusterClient()

        return cls._clients[client_type](config)

    @classmethod
    def get_available_clients(cls) -> List[str]:
        """Get list of available client types."""
        return list(cls._clients.keys())

    @classmethod
    def register_client(cls, name: str, client_class: Type[ClusterClient]) -> None:
        """Register a new client type."""
        cls._clients[name] = client_class
