"""Async client for The Noun Project API (v2)."""

from typing import Any, Dict, Optional

import httpx
import structlog
from authlib.integrations.httpx_client import OAuth1Auth
from pydantic import BaseModel

from nounproject_mcp.config import BASE_URL, REQUEST_TIMEOUT, Credentials
from nounproject_mcp.errors import MalformedResponseError
from nounproject_mcp.registry import (
    AutocompleteInput,
    CheckUsageInput,
    DownloadIconInput,
    GetCollectionInput,
    GetIconInput,
    SearchCollectionsInput,
    SearchIconsInput,
)

log = structlog.get_logger(__name__)


def default_auth(credentials: Credentials) -> httpx.Auth:
    """Sign requests with two-legged OAuth 1.0a (HMAC-SHA1, consumer key only)."""
    return OAuth1Auth(
        client_id=credentials.api_key.get_secret_value(),
        client_secret=credentials.api_secret.get_secret_value(),
    )


def _query(params: BaseModel, *path_fields: str) -> Dict[str, Any]:
    """Query parameters for a request: every set argument not used in the path."""
    return params.model_dump(exclude=set(path_fields), exclude_none=True)


class NounProjectClient:
    """One authenticated GET per operation; no caching, retries, or rate limiting.

    Args:
        credentials: API key and secret. Stored for the client's lifetime.
        base_url: API root, without a trailing slash.
        timeout: Per-request timeout in seconds.
        auth: Request signer. Defaults to OAuth 1.0a built from ``credentials``.
        transport: Optional httpx transport, used in place of the network.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        base_url: str = BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        auth: Optional[httpx.Auth] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._auth = auth if auth is not None else default_auth(credentials)
        self._transport = transport

    # ─── HTTP ────────────────────────────────────────────────────────────────

    async def _api_get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Make a signed GET request and return the decoded JSON body.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
            httpx.RequestError: On a transport failure.
            MalformedResponseError: If the body is not JSON.
        """
        log.debug("upstream_request", method="GET", path=path)
        async with httpx.AsyncClient(
            base_url=self._base_url,
            auth=self._auth,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            response = await client.get(
                path,
                params=params or {},
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            try:
                return response.json()
            except ValueError as e:
                raise MalformedResponseError(
                    f"Malformed response from {path}: body is not valid JSON"
                ) from e

    # ─── Operations ──────────────────────────────────────────────────────────

    async def search_icons(self, params: SearchIconsInput) -> Any:
        """Search icons by keyword.

        Args:
            params: Query plus optional style, line weight, public domain,
                thumbnail and pagination filters.

        Returns:
            Any: The upstream body: icon summaries and pagination tokens.
        """
        return await self._api_get("/v2/icon", _query(params))

    async def get_icon(self, params: GetIconInput) -> Any:
        """Get full metadata for one icon.

        Args:
            params: Icon ID and optional thumbnail size.

        Returns:
            Any: The upstream body with creator, tags, license and URLs.
        """
        return await self._api_get(f"/v2/icon/{params.icon_id}", _query(params, "icon_id"))

    async def get_collection(self, params: GetCollectionInput) -> Any:
        """Get a collection and the icons it contains.

        Args:
            params: Collection ID with optional thumbnail, SVG and limit options.

        Returns:
            Any: The upstream body with collection metadata and its icons.
        """
        return await self._api_get(
            f"/v2/collection/{params.collection_id}", _query(params, "collection_id")
        )

    async def search_collections(self, params: SearchCollectionsInput) -> Any:
        """Search collections by keyword.

        Args:
            params: Query plus optional blacklist, limit and pagination tokens.

        Returns:
            Any: The upstream body: collection summaries and pagination tokens.
        """
        return await self._api_get("/v2/collection", _query(params))

    async def autocomplete(self, params: AutocompleteInput) -> Any:
        """Suggest search terms for a partial query.

        Args:
            params: Partial query and optional suggestion limit.

        Returns:
            Any: The upstream body with suggested terms.
        """
        return await self._api_get("/v2/icon/autocomplete", _query(params))

    async def check_usage(self, params: Optional[CheckUsageInput] = None) -> Any:
        """Report API usage against the account's quota.

        Args:
            params: Accepted for a uniform handler signature; carries no fields.

        Returns:
            Any: The upstream usage payload, unmodified.
        """
        return await self._api_get("/v2/client/usage")

    async def get_download_url(self, params: DownloadIconInput) -> str:
        """Resolve a download URL for an icon and return only the URL.

        Args:
            params: Icon ID with optional color, filetype and PNG size.

        Returns:
            str: The download URL.

        Raises:
            MalformedResponseError: If the response carries no download URL.
        """
        path = f"/v2/icon/{params.icon_id}/download"
        data = await self._api_get(path, _query(params, "icon_id"))
        url = data.get("download_url") if isinstance(data, dict) else None
        if not isinstance(url, str) or not url:
            raise MalformedResponseError(f"Malformed response from {path}: missing download_url")
        return url
