"""
Cluster clients used to list and delete indices.
"""

from .base import ClusterClient, ClusterClientError
from .aiven import AivenClusterClient
from .memory import InMemoryClusterClient
from .factory import ClusterClientFactory

__all__ = [
    'ClusterClient',
    'ClusterClientError',
    'AivenClusterClient',
    'InMemoryClusterClient',
    'ClusterClientFactory'
]
