"""Single round-trip HTTP invocation with failure classification."""

import logging
from typing import Any

import httpx

from .exceptions import NetworkError, OtherHttpError, Unauthorized
from .models import PendingRequest

logger = logging.getLogger("pos-client.transport")


def _response_body(response: httpx.Response) -> Any:
    """Decoded JSON body when there is one, raw text otherwise."""
    try:
        return response.json()
    except ValueError:
        return response.text


class TransportInvoker:
    """Performs exactly one network call per ``invoke``; never retries.

    Failures are classified into Unauthorized (401), OtherHttpError (any other
    4xx/5xx) and NetworkError (no response at all).
    """

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    async def invoke(self, request: PendingRequest) -> httpx.Response:
        """Send ``request`` once.

        Returns:
            The response for any status below 400.

        Raises:
            Unauthorized: The server rejected the credential.
            OtherHttpError: Any other HTTP failure status.
            NetworkError: Timeout, connection or protocol failure.
        """
        logger.debug(f"{request.method} {request.path}")
        try:
            response = await self.http_client.request(
                request.method,
                request.path,
                headers=request.headers,
                json=request.body,
                params=request.params,
            )
        except httpx.RequestError as e:
            raise NetworkError(
                f"Network error: {e}",
                errors=[str(e)],
                suggestions=[
                    "Check your internet connection",
                    "Verify the API base URL is correct",
                    "Try again - this may be a temporary network issue",
                ],
                context={
                    "method": request.method,
                    "path": request.path,
                    "exception_type": type(e).__name__,
                },
            ) from e

        status_code = response.status_code
        if status_code == 401:
            logger.debug(f"{request.method} {request.path} rejected credential")
            raise Unauthorized(
                f"Authentication failed ({status_code})",
                response=response,
                context={"method": request.method, "path": request.path},
            )
        if status_code >= 400:
            body = _response_body(response)
            message = (
                f"Server error ({status_code})"
                if status_code >= 500
                else f"HTTP error ({status_code})"
            )
            raise OtherHttpError(
                f"{message}: {request.method} {request.path}",
                status_code=status_code,
                body=body,
                errors=[str(body)] if body else [],
                context={
                    "method": request.method,
                    "path": request.path,
                    "url": str(response.url),
                },
            )

        logger.debug(f"{request.method} {request.path} -> {status_code}")
        return response
