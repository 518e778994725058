"""Port catalog API client."""

import logging
from datetime import date, datetime
from typing import Any, Optional

import httpx
from pydantic import BaseModel
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from github_stats.config import Config, get_config
from github_stats.exceptions import PortAPIError, PortAuthenticationError
from github_stats.models.catalog import CatalogUser

logger = logging.getLogger(__name__)


def serialize_for_json(obj: Any) -> Any:
    """Convert objects to JSON-serializable format."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    elif isinstance(obj, date):
        return obj.isoformat()
    elif isinstance(obj, BaseModel):
        return serialize_for_json(obj.model_dump())
    elif isinstance(obj, dict):
        return {k: serialize_for_json(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [serialize_for_json(item) for item in obj]
    return obj


class PortClient:
    """Async client for the Port entity API.

    Authenticates with a client id/secret pair on first use and reuses the
    access token for the rest of the run.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or get_config()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._access_token: Optional[str] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.port_api_url,
                headers={"Content-Type": "application/json"},
                timeout=self.config.request_timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "PortClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def authenticate(self) -> str:
        """Exchange client credentials for an access token."""
        if self._access_token:
            return self._access_token

        client = await self._get_client()
        response = await client.post(
            "/auth/access_token",
            json={
                "clientId": self.config.port_client_id,
                "clientSecret": self.config.port_client_secret,
            },
        )
        body = _json_body(response)
        if response.status_code >= 400 or not body.get("accessToken"):
            raise PortAuthenticationError(
                f"Port authentication failed: {body.get('message', response.status_code)}",
                status_code=response.status_code,
                response_body=body,
            )

        self._access_token = body["accessToken"]
        logger.debug("Authenticated with Port")
        return self._access_token

    @retry(
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def _request(self, method: str, endpoint: str, **kwargs) -> dict[str, Any]:
        """Make an authenticated API request and return the JSON body."""
        token = await self.authenticate()
        client = await self._get_client()
        response = await client.request(
            method,
            endpoint,
            headers={"Authorization": f"Bearer {token}"},
            **kwargs,
        )

        body = _json_body(response)
        if response.status_code >= 400:
            raise PortAPIError(
                f"Port API error ({response.status_code}): {body.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_body=body,
            )
        return body

    async def get_entities(self, blueprint: str) -> list[CatalogUser]:
        """Get all entities of a blueprint."""
        body = await self._request("GET", f"/blueprints/{blueprint}/entities")
        entities = [CatalogUser.from_api(e) for e in body.get("entities", [])]
        logger.debug("Found %d %s entities", len(entities), blueprint)
        return entities

    async def upsert_entity(
        self,
        blueprint: str,
        identifier: str,
        title: Optional[str],
        properties: dict[str, Any],
        relations: dict[str, Any],
    ) -> dict[str, Any]:
        """Create or replace an entity.

        The entity is written exactly as given, so callers pass the full
        property set and relations they want to keep.
        """
        entity: dict[str, Any] = {"identifier": identifier}
        if title is not None:
            entity["title"] = title
        entity["properties"] = properties
        entity["relations"] = relations

        payload = serialize_for_json(entity)
        return await self._request(
            "POST",
            f"/blueprints/{blueprint}/entities",
            params={"upsert": "true"},
            json=payload,
        )


def _json_body(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
