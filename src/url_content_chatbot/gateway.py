"""
Gateway client for the remote content-processing and agent service.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import GatewayConfig
from .exceptions import ParseError, RemoteOperationError, TransportError
from .models import GatewayCallRecord


BODYLESS_METHODS = ("GET", "DELETE")


def expect_field(response: Any, key: Optional[str] = None) -> Any:
    """Return ``response[key]``, raising if the service reported an error or left it out."""
    if not isinstance(response, dict):
        raise RemoteOperationError(f"Expected a JSON object, got {type(response).__name__}")

    if response.get("error"):
        raise RemoteOperationError(
            f"Remote service error: {response['error']}",
            details={"response": response}
        )

    if key is None:
        return response

    if response.get(key) is None:
        raise RemoteOperationError(
            f"Response is missing '{key}'",
            details={"response": response}
        )
    return response[key]


class GatewayClient:
    """Authenticated JSON client that records every call it makes."""

    def __init__(self, config: GatewayConfig, logger: logging.Logger,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the gateway client."""
        self.config = config
        self.logger = logger
        self._call_log: List[GatewayCallRecord] = []
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {config.api_key}",
                "X-Generated-App-ID": config.app_id,
            },
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def call_log(self) -> List[GatewayCallRecord]:
        return list(self._call_log)

    def clear_call_log(self) -> None:
        self._call_log.clear()

    async def call(self, endpoint: str, payload: Optional[Dict[str, Any]] = None, method: str = "POST") -> Any:
        """Send one request and return the parsed JSON body verbatim.

        Status codes are recorded but not interpreted; callers decide what a
        response means. Transport and parse failures are raised as
        ``TransportError`` / ``ParseError`` after the call has been recorded.
        """
        method = method.upper()
        payload = payload if payload is not None else {}
        body = None if method in BODYLESS_METHODS else payload

        self.logger.debug(f"Gateway {method} {endpoint}")

        try:
            response = await self._client.request(method, endpoint, json=body)
        except httpx.TimeoutException as e:
            error = TransportError(f"Request to {endpoint} timed out: {str(e)}", endpoint, error_code="timeout")
            self._record(endpoint, method, payload, {"error": error.message}, error=error.message)
            self.logger.warning(error.message)
            raise error from e
        except (httpx.HTTPError, httpx.InvalidURL, RuntimeError) as e:
            # RuntimeError: httpx refuses to send once the client is closed
            error = TransportError(f"Request to {endpoint} failed: {str(e)}", endpoint, error_code="transport")
            self._record(endpoint, method, payload, {"error": error.message}, error=error.message)
            self.logger.warning(error.message)
            raise error from e

        try:
            result = response.json() if response.content.strip() else {}
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            error = ParseError(
                f"Invalid JSON from {endpoint}: {str(e)}",
                endpoint,
                error_code="parse",
                details={"status_code": response.status_code, "body": response.text}
            )
            self._record(
                endpoint, method, payload,
                {"error": error.message, "body": response.text},
                status_code=response.status_code,
                error=error.message
            )
            self.logger.warning(error.message)
            raise error from e

        self._record(endpoint, method, payload, result, status_code=response.status_code)
        return result

    def _record(self, endpoint: str, method: str, request: Any, response: Any,
                status_code: Optional[int] = None, error: Optional[str] = None) -> None:
        self._call_log.append(GatewayCallRecord(
            endpoint=endpoint,
            method=method,
            request=request,
            response=response,
            status_code=status_code,
            error=error,
        ))
