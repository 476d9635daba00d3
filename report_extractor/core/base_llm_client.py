"""HTTP plumbing for chat-completions providers.

Retries server errors, rate limiting, timeouts and dropped connections with
exponential backoff. Other client errors fail on the first attempt.
"""

import asyncio
from typing import Any, Dict, Optional

import httpx

from report_extractor.core.exceptions import APIClientError, APITimeoutError
from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)

RATE_LIMITED = 429
ERROR_BODY_LOG_LIMIT = 500


class BaseLLMClient:
    """POSTs JSON payloads to one provider endpoint.

    Attributes:
        base_url: Endpoint every call is sent to unless a suffix is given
        timeout: Per-request timeout in seconds
        max_retries: Total attempts per call (at least one)
        retry_delay: First backoff delay in seconds, doubled per attempt
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: int = 60,
        max_retries: int = 3,
        retry_delay: int = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.transport = transport

    def _headers(self, extra: Optional[Dict[str, str]]) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        headers.update(extra or {})
        return headers

    async def call_api(
        self,
        endpoint: str = "",
        payload: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """POST ``payload`` and return the decoded JSON body.

        Args:
            endpoint: Optional suffix appended to ``base_url``
            payload: JSON request body
            headers: Headers merged over the defaults

        Returns:
            Decoded response body

        Raises:
            APIClientError: Non-retryable status, non-JSON body, or retries exhausted
            APITimeoutError: Every attempt timed out
        """
        url = f"{self.base_url}{endpoint}"
        request_headers = self._headers(headers)
        LOGGER.debug(f"POST {url}", extra={"timeout": self.timeout})

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            for attempt in range(1, self.max_retries + 1):
                final = attempt == self.max_retries
                try:
                    response = await client.post(url, headers=request_headers, json=payload)
                    response.raise_for_status()
                except httpx.HTTPStatusError as e:
                    self._check_status(e, attempt, url, final)
                except httpx.TimeoutException as e:
                    LOGGER.warning(f"LLM request timed out (attempt {attempt}/{self.max_retries})", extra={"url": url})
                    if final:
                        raise APITimeoutError(
                            f"LLM request timed out after {self.max_retries} attempts", original_error=e
                        ) from e
                except httpx.TransportError as e:
                    LOGGER.warning(
                        f"LLM transport error (attempt {attempt}/{self.max_retries})",
                        extra={"url": url, "error": str(e)},
                    )
                    if final:
                        raise APIClientError(f"LLM transport error: {e}", original_error=e) from e
                else:
                    try:
                        return response.json()
                    except ValueError as e:
                        raise APIClientError(f"LLM API returned a non-JSON body: {e}", original_error=e) from e

                await asyncio.sleep(self.retry_delay * 2 ** (attempt - 1))

        raise APIClientError(f"LLM request to {url} failed after {self.max_retries} attempts")

    def _check_status(self, error: httpx.HTTPStatusError, attempt: int, url: str, final: bool) -> None:
        """Raise unless the status is worth another attempt."""
        status = error.response.status_code
        body = error.response.text
        LOGGER.warning(
            f"LLM API returned HTTP {status} (attempt {attempt}/{self.max_retries})",
            extra={"url": url, "status_code": status, "error_body": body[:ERROR_BODY_LOG_LIMIT]},
        )

        if status < 500 and status != RATE_LIMITED:
            raise APIClientError(f"LLM API rejected the request with {status}: {body}", original_error=error) from error
        if final:
            raise APIClientError(f"LLM API returned {status} after {self.max_retries} attempts", original_error=error) from error
