import ipaddress
import socket
import time
from urllib.parse import urljoin, urlparse

import httpx

from app.config import settings
from app.models.fetch import PageFetchResult

ALLOWED_SCHEMES = {"http", "https"}


class FetchError(RuntimeError):
    """The page could not be retrieved; the scan is aborted."""

    default_message = "could not reach the URL"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidURLError(FetchError):
    default_message = "the URL is invalid or not allowed"


class FetchTimeoutError(FetchError):
    default_message = "request timed out"


class FetchStatusError(FetchError):
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"received HTTP {status_code}")


class ContentTooLargeError(FetchError):
    default_message = "response body exceeds the maximum allowed size"


def _is_private_address(hostname: str) -> bool:
    """Return True if *hostname* resolves to a private, loopback, or link-local address."""
    try:
        infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror:
        return False

    for info in infos:
        # Strip IPv6 zone IDs (e.g. "::1%eth0" → "::1")
        raw_ip = str(info[4][0]).split("%")[0]
        try:
            addr = ipaddress.ip_address(raw_ip)
        except ValueError:
            continue
        if addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_reserved:
            return True
    return False


def validate_url(url: str) -> None:
    """Raise InvalidURLError if *url* fails SSRF / scheme validation."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise InvalidURLError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    if not parsed.hostname:
        raise InvalidURLError("URL must have a valid hostname.")

    if _is_private_address(parsed.hostname):
        raise InvalidURLError("Requests to private/internal addresses are not allowed.")


async def fetch_page(url: str) -> PageFetchResult:
    """Fetch *url* and return the body together with status, timing and headers.

    Redirects are followed manually so that every redirect destination is
    validated against the SSRF rules before the next request is made. The
    reported response time covers the whole exchange, redirects included.

    Raises:
        InvalidURLError: if the URL (or a redirect target) fails validation.
        FetchTimeoutError: if the server does not answer in time.
        FetchStatusError: on a non-2xx final response.
        ContentTooLargeError: if the body exceeds ``MAX_CONTENT_SIZE``.
        FetchError: on any other network failure.
    """
    validate_url(url)

    current_url = url
    started = time.perf_counter()
    headers = {"User-Agent": settings.USER_AGENT}
    try:
        async with httpx.AsyncClient(
            follow_redirects=False, timeout=settings.FETCH_TIMEOUT, headers=headers
        ) as client:
            for _ in range(settings.MAX_REDIRECTS + 1):
                async with client.stream("GET", current_url) as response:
                    if response.is_redirect:
                        location = response.headers.get("location", "")
                        next_url = urljoin(current_url, location)
                        validate_url(next_url)
                        current_url = next_url
                        continue

                    if not response.is_success:
                        raise FetchStatusError(response.status_code)

                    content_length = response.headers.get("content-length")
                    # A malformed header is ignored; the streamed size is still capped below
                    if (
                        content_length
                        and content_length.isdigit()
                        and int(content_length) > settings.MAX_CONTENT_SIZE
                    ):
                        raise ContentTooLargeError()

                    chunks = []
                    total = 0
                    async for chunk in response.aiter_bytes():
                        total += len(chunk)
                        if total > settings.MAX_CONTENT_SIZE:
                            raise ContentTooLargeError()
                        chunks.append(chunk)

                    elapsed_ms = (time.perf_counter() - started) * 1000
                    encoding = response.encoding or "utf-8"
                    return PageFetchResult(
                        url=current_url,
                        status_code=response.status_code,
                        response_time_ms=round(elapsed_ms, 2),
                        html=b"".join(chunks).decode(encoding, errors="replace"),
                        headers=list(response.headers.multi_items()),
                    )
    except httpx.TimeoutException as exc:
        raise FetchTimeoutError() from exc
    except httpx.HTTPError as exc:
        raise FetchError() from exc

    raise FetchError("Too many redirects.")
