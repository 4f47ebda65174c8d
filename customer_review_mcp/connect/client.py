"""
HTTP client for the App Store Connect REST API.

Owns a single httpx.AsyncClient for connection pooling. Every request
gets its own bearer token from the TokenIssuer; nothing is retried.
"""

from typing import Any

import httpx

from customer_review_mcp.config.logging import get_logger
from customer_review_mcp.config.settings import ConnectSettings
from customer_review_mcp.connect.credentials import TokenIssuer
from customer_review_mcp.errors import UpstreamError

logger = get_logger(__name__)


def extract_error_detail(response: httpx.Response) -> str | None:
    """
    Pull the first ``errors[].detail`` out of a JSON:API error document.

    Returns None when the body is not JSON or carries no detail.
    """
    try:
        payload = response.json()
    except ValueError:
        return None

    if not isinstance(payload, dict):
        return None
    errors = payload.get("errors")
    if not isinstance(errors, list) or not errors:
        return None
    first = errors[0]
    if isinstance(first, dict) and first.get("detail"):
        return str(first["detail"])
    return None


class ConnectClient:
    """
    Authorized request/response exchange with App Store Connect.

    Use as an async context manager, or call ``aclose()`` when done.

    Args:
        settings: Base URL and timeout for the API
        issuer: Token issuer consulted once per request
        transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
    """

    def __init__(
        self,
        settings: ConnectSettings,
        issuer: TokenIssuer,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._issuer = issuer
        self._http = httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *_args):
        await self.aclose()
        return None

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """
        Send one authorized request and return the decoded JSON body.

        Args:
            method: HTTP verb (GET, POST, DELETE)
            path: Path relative to the API root, e.g. "/apps/123"
            params: Query parameters, already serialized per API conventions
            json: Request body for POST

        Returns:
            The decoded JSON body, or None when the response has no body

        Raises:
            CredentialError: If no token could be issued
            UpstreamError: On a non-2xx status or a transport failure
        """
        token = await self._issuer.issue_token()
        headers = {"Authorization": f"Bearer {token}"}

        try:
            response = await self._http.request(
                method,
                path,
                params=params or None,
                json=json,
                headers=headers,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = extract_error_detail(e.response) or str(e)
            logger.warning(
                f"{method} {path} failed with HTTP {e.response.status_code}: {detail}"
            )
            raise UpstreamError(detail, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            detail = str(e) or type(e).__name__
            logger.warning(f"{method} {path} transport error: {detail}")
            raise UpstreamError(detail) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                f"Response was not valid JSON (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from e
