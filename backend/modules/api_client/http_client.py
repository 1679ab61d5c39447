"""
Backend HTTP client with standardized envelope handling and logging.

This module provides the single client every resource API goes through:
- Attaches the admin bearer token to every authenticated request
- Judges every answer by the ``success`` discriminant of its JSON envelope
- Maps transport failures to one generic, user-presentable message
- Logs every failure with the operation and URL it belongs to
"""

import logging
from typing import Any, Dict, Optional, Protocol

import httpx

from .errors import (
    UNEXPECTED_FORMAT_MESSAGE,
    BackendError,
    TransportError,
    UnauthenticatedError,
)

logger = logging.getLogger(__name__)


class TokenProvider(Protocol):
    """Anything that can hand out the current admin token."""

    def get_token(self) -> Optional[str]:
        ...


class BackendHTTPClient:
    """
    Async HTTP client for the rewards backend.

    One ``httpx.AsyncClient`` is opened per request, as the rest of the
    application does. Tests pass ``transport`` (usually ``httpx.MockTransport``)
    to answer requests without a network.
    """

    def __init__(
        self,
        base_url: str,
        auth_store: Optional[TokenProvider] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL of the backend API
            auth_store: Source of the bearer token
            timeout: Default timeout for requests in seconds
            transport: Optional transport override (tests)
        """
        self.base_url = base_url.rstrip('/')
        self.auth_store = auth_store
        self.timeout = timeout
        self._transport = transport

    def _build_url(self, endpoint: str) -> str:
        """Build full URL from endpoint."""
        if endpoint.startswith('http'):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _build_headers(self, authenticated: bool) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if not authenticated:
            return headers
        token = self.auth_store.get_token() if self.auth_store else None
        if not token:
            raise UnauthenticatedError("You are not logged in.", status_code=None)
        headers["Authorization"] = f"Bearer {token}"
        return headers

    def _read_envelope(
        self, response: httpx.Response, operation: str, url: str, fallback_message: str
    ) -> Dict[str, Any]:
        """
        Turn a response into a success envelope or raise.

        HTTP status codes only matter when the body carries no usable
        envelope; a 401 is always an authentication failure.
        """
        try:
            payload = response.json()
        except ValueError:
            logger.error(
                f"Non-JSON response ({response.status_code}) during {operation} to {url}"
            )
            if response.status_code == 401:
                raise UnauthenticatedError()
            raise TransportError()

        if not isinstance(payload, dict):
            logger.error(f"Unexpected payload type {type(payload).__name__} during {operation} to {url}")
            raise TransportError(UNEXPECTED_FORMAT_MESSAGE)

        message = payload.get("message")
        if not isinstance(message, str) or not message.strip():
            message = None

        if response.status_code == 401:
            logger.warning(f"Backend rejected credentials during {operation} to {url}")
            raise UnauthenticatedError(message or UnauthenticatedError().message)

        success = payload.get("success")
        if success is True:
            logger.info(f"Successful {operation} to {url}")
            return payload

        if success is False or not response.is_success:
            logger.warning(
                f"Backend reported failure ({response.status_code}) during {operation} to {url}: "
                f"{message or fallback_message}"
            )
            raise BackendError(message or fallback_message, response.status_code)

        logger.error(f"Envelope without success flag during {operation} to {url}")
        raise TransportError(UNEXPECTED_FORMAT_MESSAGE)

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        fallback_message: str = "Request failed.",
        authenticated: bool = True,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Perform an async request and return the success envelope.

        Args:
            method: HTTP method
            endpoint: API endpoint or full URL
            params: Query parameters
            json_data: JSON payload
            data: Form fields (multipart when ``files`` is given)
            files: Multipart file parts
            fallback_message: Message used when a failure envelope has none
            authenticated: Whether to attach the bearer token
            timeout: Request timeout (overrides default)

        Returns:
            The decoded JSON envelope with ``success: true``

        Raises:
            UnauthenticatedError: Missing token or HTTP 401
            BackendError: Failure envelope from the backend
            TransportError: Network failure or unusable body
        """
        url = self._build_url(endpoint)
        operation = f"{method.upper()} request"
        headers = self._build_headers(authenticated)
        request_timeout = timeout or self.timeout

        try:
            async with httpx.AsyncClient(timeout=request_timeout, transport=self._transport) as client:
                logger.debug(f"{operation} to {url} with params: {params}")
                response = await client.request(
                    method.upper(),
                    url,
                    params=params,
                    json=json_data,
                    data=data,
                    files=files,
                    headers=headers,
                )
        except httpx.TimeoutException as e:
            logger.error(f"Timeout during {operation} to {url}: {e}", exc_info=True)
            raise TransportError()
        except httpx.RequestError as e:
            logger.error(f"Request error during {operation} to {url}: {e}", exc_info=True)
            raise TransportError()

        return self._read_envelope(response, operation, url, fallback_message)

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Dict[str, Any]:
        return await self.request("GET", endpoint, params=params, **kwargs)

    async def post(self, endpoint: str, **kwargs) -> Dict[str, Any]:
        return await self.request("POST", endpoint, **kwargs)

    async def put(self, endpoint: str, **kwargs) -> Dict[str, Any]:
        return await self.request("PUT", endpoint, **kwargs)

    async def patch(self, endpoint: str, **kwargs) -> Dict[str, Any]:
        return await self.request("PATCH", endpoint, **kwargs)

    async def delete(self, endpoint: str, **kwargs) -> Dict[str, Any]:
        return await self.request("DELETE", endpoint, **kwargs)
