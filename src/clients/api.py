"""Remote API Client"""

import asyncio
from typing import Any

import httpx
import pybreaker

from blueprint import ApiConfig
from core import get_logger, safe_json_dumps
from core.json import JSONParseError, loads

logger = get_logger(__name__)


class ApiError(Exception):
    """A remote call failed (transport error, open breaker or non-2xx status)."""

    def __init__(self, message: str, status_code: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "status_code": self.status_code, "url": self.url}


class ApiClient:
    """
    JSON request/response client with circuit breaker protection.
    Used for `api`/`submit` actions and mount-time data fetches.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        fail_max: int = 5,
        reset_timeout: int = 30,
    ) -> None:
        """
        Initialize API client with circuit breaker.

        Args:
            base_url: Prefix for relative URLs (empty for absolute-only)
            timeout: Request timeout in seconds
            fail_max: Consecutive failures before the breaker opens
            reset_timeout: Seconds before an open breaker allows a trial call
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout)

        class BreakerListener(pybreaker.CircuitBreakerListener):
            """Listener for circuit breaker state changes."""

            def state_change(self, cb, old_state, new_state):
                """Called when circuit breaker state changes."""
                logger.warning(
                    "breaker_state_change",
                    breaker=cb.name,
                    from_state=str(old_state),
                    to_state=str(new_state),
                )

        self._breaker = pybreaker.CircuitBreaker(
            fail_max=fail_max,
            reset_timeout=reset_timeout,
            name="api-http",
            listeners=[BreakerListener()],
        )

        logger.info("client_init", url=self.base_url or None)

    def request(self, config: ApiConfig) -> Any:
        """
        Perform a remote call and decode its JSON payload.

        Args:
            config: Fully resolved request description

        Returns:
            Decoded JSON payload (None for an empty body)

        Raises:
            ApiError: On transport errors, an open breaker, a status outside
                the 2xx range or an undecodable body
        """
        method = config.method.value
        headers = {"Content-Type": "application/json", **config.headers}
        content = safe_json_dumps(config.body, default=str) if config.body is not None else None

        # Server errors count towards opening the breaker, client errors don't
        def _make_request() -> httpx.Response:
            response = self._client.request(method, config.url, headers=headers, content=content)
            if response.status_code >= 500:
                raise ApiError(
                    f"API call failed: {response.status_code} {response.reason_phrase}",
                    status_code=response.status_code,
                    url=config.url,
                )
            return response

        logger.debug("api_request", method=method, url=config.url)
        try:
            response = self._breaker.call(_make_request)
        except pybreaker.CircuitBreakerError:
            logger.error("api_request_failed", url=config.url, error="Circuit breaker open")
            raise ApiError("Circuit breaker open - remote unavailable", url=config.url)
        except httpx.HTTPError as e:
            logger.warning("http_error", url=config.url, error=str(e))
            raise ApiError(f"API call failed: {e}", url=config.url) from e

        if not response.is_success:
            raise ApiError(
                f"API call failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                url=config.url,
            )

        if not response.content:
            return None
        try:
            return loads(response.content)
        except JSONParseError as e:
            raise ApiError(f"Invalid JSON response: {e}", status_code=response.status_code, url=config.url) from e

    async def request_async(self, config: ApiConfig) -> Any:
        """Run `request` in the default executor so the event loop keeps running."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.request, config)

    def close(self) -> None:
        """Close HTTP client"""
        self._client.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
