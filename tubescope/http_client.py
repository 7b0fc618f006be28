"""Outbound transport for the upstream API.

Uses curl_cffi with browser TLS fingerprint impersonation, bound to an
optional egress address. A Transport is stateless per call: it sends once,
classifies the status, and hands back the raw body. Retries and deadlines
belong to the caller.
"""

import ipaddress
import logging
from dataclasses import dataclass

from curl_cffi import CurlError
from curl_cffi.requests import AsyncSession

from tubescope.exceptions import (
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    TransportError,
    UnknownStatusError,
    UpstreamError,
)
from tubescope.operations import Operation, OperationProfile
from tubescope.schema import decode_base64_body

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedRequest:
    """A fully serialized request: everything needed to send it, nothing else."""

    operation: Operation
    path: str
    headers: dict[str, str]
    body: bytes


def raise_for_status(status_code: int, body: bytes = b"", operation: str = "request") -> None:
    """Map an upstream status onto the error taxonomy. Returns only for 200."""
    if status_code == 200:
        return
    if status_code == 404:
        raise NotFoundError(f"{operation}: upstream returned 404")
    if status_code == 429:
        raise RateLimitError(f"{operation}: upstream rate limit hit. Wait a moment and retry.")
    if status_code == 401:
        raise AuthenticationError(f"{operation}: upstream rejected the credentials")
    if status_code in (500, 503):
        raise UpstreamError(f"{operation}: upstream error (HTTP {status_code})")
    logger.warning("%s: unexpected status %s: %r", operation, status_code, body[:500])
    raise UnknownStatusError(status_code, f"{operation}: unexpected upstream status {status_code}")


class Transport:
    def __init__(
        self,
        target_host: str,
        local_address: ipaddress.IPv6Address | None = None,
        proxy: str | None = None,
        verify: bool = True,
        impersonate: str = "chrome",
    ):
        self.target_host = target_host
        self.local_address = local_address
        self.proxy = proxy
        self._session = AsyncSession(
            impersonate=impersonate,
            interface=str(local_address) if local_address else None,
            proxy=proxy,
            verify=verify,
            timeout=None,
        )
        self._in_flight = 0
        self._retired = False
        self._closed = False

    async def send(self, request: PreparedRequest, profile: OperationProfile) -> bytes | None:
        """Send a prepared request and return its body.

        Returns None when the operation treats 404 as an empty result.
        """
        url = f"https://{self.target_host}{request.path}"
        operation = request.operation.value
        logger.debug("POST %s (%s) via %s", request.path, operation, self.local_address or "default route")

        self._in_flight += 1
        try:
            resp = await self._session.post(url, headers=request.headers, data=request.body, allow_redirects=False)
        except CurlError as e:
            raise TransportError(f"{operation}: {e}") from e
        finally:
            self._in_flight -= 1
            if self._retired and not self._in_flight:
                await self.aclose()

        if resp.status_code == 404 and profile.not_found_is_empty:
            return None
        raise_for_status(resp.status_code, resp.content, operation)

        body = resp.content
        if profile.base64_response:
            body = decode_base64_body(body)
        return body

    async def retire(self) -> None:
        """Close once the last in-flight call has finished. Never cancels."""
        self._retired = True
        if not self._in_flight:
            await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._session.close()
