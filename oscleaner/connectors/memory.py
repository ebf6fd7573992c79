"""
In-memory cluster client.

Keeps index listings per service in process memory. Used by the test suite
and by offline runs that replay a saved listing.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from oscleaner.connectors.base import ClusterClient, ClusterClientError
from oscleaner.retention.models import IndexInfo


class InMemoryClusterClient(ClusterClient):
    """Cluster client backed by a dictionary of service -> indices."""

    def __init__(self,
                 indices: Optional[Dict[str, Iterable[IndexInfo]]] = None,
                 failing_services: Optional[Iterable[str]] = None,
                 failing_deletes: Optional[Iterable[str]] = None):
        """
        Args:
            indices: Initial index listing per service
            failing_services: Services whose listing raises ClusterClientError
            failing_deletes: Index names whose deletion raises ClusterClientError
        """
        super().__init__({})
        self.indices: Dict[str, List[IndexInfo]] = {
            service: list(items) for service, items in (indices or {}).items()
        }
        self.failing_services: Set[str] = set(failing_services or [])
        self.failing_deletes: Set[str] = set(failing_deletes or [])
        self.deleted: List[tuple] = []
        self.connected = False
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_file(cls, path: str) -> "InMemoryClusterClient":
        """
        Load a listing saved as JSON::

            {"my-service": [{"index_name": "app-logs-2024.01.01", "size": 1024}]}
        """
        with open(Path(path), 'r') as f:
            data = json.load(f)

        indices = {}
        for service, items in data.items():
            indices[service] = [
                IndexInfo(
                    name=item["index_name"],
                    size_bytes=int(item.get("size", 0)),
                    creation_time=datetime.fromisoformat(item["create_time"]) if item.get("create_time") else None
                )
                for item in items
            ]
        return cls(indices)

    async def connect(self) -> bool:
        self.connected = True
        return True

    async def disconnect(self) -> None:
        self.connected = False

    async def list_indices(self, service: str) -> List[IndexInfo]:
        if service in self.failing_services:
            raise ClusterClientError(f"Failed to list indices for service {service}")
        if service not in self.indices:
            raise ClusterClientError(f"Service {service} not found", status_code=404)
        return list(self.indices[service])

    async def delete_index(self, service: str, index_name: str) -> None:
        if index_name in self.failing_deletes:
            raise ClusterClientError(f"Failed to delete index {index_name}")

        remaining = [index for index in self.indices.get(service, []) if index.name != index_name]
        if len(remaining) == len(self.indices.get(service, [])):
            raise ClusterClientError(f"Index {index_name} not found in {service}", status_code=404)

        self.indices[service] = remaining
        self.deleted.append((service, index_name))
        self.logger.debug(f"Deleted {index_name} from in-memory service {service}")
