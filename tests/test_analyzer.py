"""Tests for app.services.analyzer."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from app.models.fetch import PageFetchResult
from app.services.analyzer import analyze, scan_url
from app.services.fetcher import FetchStatusError, FetchTimeoutError

_URL = "https://example.com/"

_SPA_SHELL = '<html><head><title>App</title></head><body><div id="root"></div></body></html>'
_SPA_RENDERED = (
    "<html><head><title>App</title></head><body><div id=\"root\"><h1>Rendered</h1>"
    + "<p>content rendered by the browser with plenty of readable words in it</p>" * 5
    + "</div></body></html>"
)


def _fetch(html: str, **kwargs) -> PageFetchResult:
    return PageFetchResult(url=_URL, html=html, **kwargs)


class TestAnalyze:
    def test_determinism(self):
        fetch = _fetch(
            "<html><head><title>Stable page</title></head><body><h1>Stable</h1>"
            "<p>alpha beta gamma alpha beta</p></body></html>",
            response_time_ms=120,
            headers=[("Content-Encoding", "gzip")],
        )
        assert analyze(fetch).model_dump_json() == analyze(fetch).model_dump_json()

    def test_score_matches_issues_and_signals(self):
        result = analyze(_fetch("<html><head><title>Hi</title></head><body><h1>Hi</h1></body></html>"))
        assert result.meta_tags.title == "Hi"
        assert result.score.overall == sum(result.score.categories().values())
        assert result.issues.errors or result.issues.warnings

    def test_empty_page_is_not_fatal(self):
        result = analyze(_fetch(""))
        assert result.content.content_length == "short"
        assert 0 <= result.score.overall < 50


class TestScanUrl:
    def test_http_mode(self):
        with (
            patch("app.services.analyzer.fetch_page", new=AsyncMock(return_value=_fetch(_SPA_RENDERED))),
            patch(
                "app.services.analyzer.fetch_page_with_browser",
                new=AsyncMock(side_effect=AssertionError("browser must not be called")),
            ),
        ):
            result, platform = asyncio.run(scan_url(_URL, "http"))
        assert platform == "ssr"
        assert result.headings.h1 == ["Rendered"]

    def test_auto_mode_rerenders_spa_shell(self):
        with (
            patch("app.services.analyzer.fetch_page", new=AsyncMock(return_value=_fetch(_SPA_SHELL))),
            patch(
                "app.services.analyzer.fetch_page_with_browser",
                new=AsyncMock(return_value=_fetch(_SPA_RENDERED)),
            ) as browser,
        ):
            result, platform = asyncio.run(scan_url(_URL, "auto"))
        browser.assert_awaited_once()
        assert platform == "ssr"
        assert result.headings.h1 == ["Rendered"]

    def test_auto_mode_keeps_http_result_when_browser_fails(self):
        with (
            patch("app.services.analyzer.fetch_page", new=AsyncMock(return_value=_fetch(_SPA_SHELL))),
            patch(
                "app.services.analyzer.fetch_page_with_browser",
                new=AsyncMock(side_effect=FetchTimeoutError()),
            ),
        ):
            result, platform = asyncio.run(scan_url(_URL, "auto"))
        assert platform == "spa"
        assert result.headings.h1 == []

    def test_fetch_failure_aborts_before_extraction(self):
        with (
            patch("app.services.analyzer.fetch_page", new=AsyncMock(side_effect=FetchStatusError(404))),
            patch("app.services.analyzer.extract_signals") as extract,
        ):
            with pytest.raises(FetchStatusError) as excinfo:
                asyncio.run(scan_url(_URL, "http"))
        extract.assert_not_called()
        assert str(excinfo.value) == "received HTTP 404"
