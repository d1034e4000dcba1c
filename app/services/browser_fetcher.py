"""Playwright-based fetcher for JavaScript-rendered (dynamic) web pages."""

import time

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from app.config import settings
from app.models.fetch import PageFetchResult
from app.services.fetcher import (
    ContentTooLargeError,
    FetchError,
    FetchStatusError,
    FetchTimeoutError,
    validate_url,
)


async def fetch_page_with_browser(url: str) -> PageFetchResult:
    """Render *url* with a headless Chromium browser.

    The returned HTML is the DOM after scripts ran; status and headers come
    from the main document response.

    Raises:
        InvalidURLError: if the URL fails SSRF / scheme validation.
        FetchTimeoutError: if navigation does not settle in time.
        FetchStatusError: on a non-2xx document response.
        ContentTooLargeError: if the rendered HTML exceeds ``MAX_CONTENT_SIZE``.
        FetchError: on any other browser or network failure.
    """
    validate_url(url)
    timeout_ms = settings.FETCH_TIMEOUT * 1000

    started = time.perf_counter()
    try:
        async with async_playwright() as pw:
            browser = await pw.chromium.launch(
                headless=True,
                args=[
                    # --no-sandbox is required when running as root inside a container
                    "--no-sandbox",
                    "--disable-dev-shm-usage",
                    "--disable-gpu",
                ],
            )
            context = await browser.new_context(user_agent=settings.USER_AGENT)
            page = await context.new_page()
            try:
                response = await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
                if response is None:
                    raise FetchError()
                if not response.ok:
                    raise FetchStatusError(response.status)
                elapsed_ms = (time.perf_counter() - started) * 1000
                headers = await response.headers_array()
                html = await page.content()
                final_url = page.url
            finally:
                await context.close()
                await browser.close()
    except PlaywrightTimeoutError as exc:
        raise FetchTimeoutError() from exc
    except PlaywrightError as exc:
        raise FetchError() from exc

    if len(html.encode()) > settings.MAX_CONTENT_SIZE:
        raise ContentTooLargeError("Rendered HTML exceeds the maximum allowed size.")

    return PageFetchResult(
        url=final_url,
        status_code=response.status,
        response_time_ms=round(elapsed_ms, 2),
        html=html,
        headers=[(h["name"], h["value"]) for h in headers],
    )
