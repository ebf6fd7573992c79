"""
Aiven for OpenSearch cluster client.

This module implements the ClusterClient interface on top of the Aiven REST
API (v1), which exposes the index listing and index deletion of a managed
OpenSearch service.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Any
from urllib.parse import quote

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from oscleaner.connectors.base import ClusterClient, ClusterClientError
from oscleaner.retention.models import IndexInfo

DEFAULT_API_URL = "https://api.aiven.io"

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class RetryableStatusError(ClusterClientError):
    """Transient HTTP status from the API (rate limit or server error)."""


def _parse_create_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class AivenClusterClient(ClusterClient):
    """
    Cluster client for Aiven managed OpenSearch services.

    Lists and deletes indices of the services of one Aiven project.
    """

    def __init__(self, config, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the Aiven client.

        Args:
            config: CleanerSettings object or dictionary containing:
                - aiven_api_token: Aiven API token
                - aiven_project: Aiven project name
                - aiven_api_url: API base URL (default: https://api.aiven.io)
            transport: Optional httpx transport (used by tests)
        """
        # Handle both Pydantic model and dict
        if hasattr(config, 'aiven_api_token'):
            self.api_token = config.aiven_api_token
            self.project = config.aiven_project
            self.base_url = config.aiven_api_url
        else:
            self.api_token = config.get("aiven_api_token")
            self.project = config.get("aiven_project")
            self.base_url = config.get("aiven_api_url", DEFAULT_API_URL)

        super().__init__({})
        self.client: Optional[httpx.AsyncClient] = None
        self.logger = logging.getLogger(__name__)
        self._transport = transport

        if not self.api_token or not self.project:
            raise ValueError("Aiven API token and project are required")

    async def connect(self) -> bool:
        """Create the HTTP client for the Aiven API."""
        if self.client is not None:
            return True

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"aivenv1 {self.api_token}",
                "Content-Type": "application/json"
            },
            timeout=30.0,
            transport=self._transport
        )
        self.logger.info(f"Aiven client ready for project {self.project}")
        return True

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self.client:
            await self.client.aclose()
            self.client = None
            self.logger.info("Disconnected from Aiven API")

    def _service_path(self, service: str) -> str:
        return f"/v1/project/{quote(self.project, safe='')}/service/{quote(service, safe='')}"

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((httpx.TransportError, RetryableStatusError)),
        reraise=True
    )
    async def _make_request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """Make a request to the Aiven API with retry logic."""
        if not self.client:
            await self.connect()

        response = await self.client.request(method, endpoint, **kwargs)

        if response.status_code in RETRYABLE_STATUS_CODES:
            self.logger.warning(f"Aiven API returned {response.status_code} for {method} {endpoint}, retrying")
            raise RetryableStatusError(
                f"Aiven API error {response.status_code}: {response.text}",
                status_code=response.status_code
            )

        return response

    async def _request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        try:
            response = await self._make_request(method, endpoint, **kwargs)
        except RetryableStatusError:
            raise
        except httpx.HTTPError as e:
            raise ClusterClientError(f"Aiven request {method} {endpoint} failed: {e}") from e

        if response.status_code >= 400:
            raise ClusterClientError(
                f"Aiven API error {response.status_code}: {response.text}",
                status_code=response.status_code
            )
        return response

    async def list_indices(self, service: str) -> List[IndexInfo]:
        """List the indices of an Aiven OpenSearch service."""
        response = await self._request("GET", f"{self._service_path(service)}/index")

        try:
            payload: Dict[str, Any] = response.json()
        except ValueError as e:
            raise ClusterClientError(f"Invalid index listing for {service}: {e}") from e

        indices = []
        for item in payload.get("indexes", []):
            name = item.get("index_name")
            if not name:
                continue
            indices.append(IndexInfo(
                name=name,
                size_bytes=int(item.get("size") or 0),
                creation_time=_parse_create_time(item.get("create_time"))
            ))

        self.logger.debug(f"Listed {len(indices)} indices for service {service}")
        return indices

    async def delete_index(self, service: str, index_name: str) -> None:
        """Delete an index of an Aiven OpenSearch service."""
        await self._request(
            "DELETE",
            f"{self._service_path(service)}/index/{quote(index_name, safe='')}"
        )
        self.logger.debug(f"Index {index_name} deleted from service {service}")
