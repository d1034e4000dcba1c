"""Tests for app.services.detector.detect_platform."""

from app.services.detector import SPA_MIN_WORDS, detect_platform


def _spa_html(extra: str = "") -> str:
    """Minimal HTML shell that a SPA would return over plain HTTP."""
    return f"<!DOCTYPE html><html><head><title>App</title></head><body>{extra}</body></html>"


class TestDetectWordPress:
    def test_wp_content_path(self):
        html = '<img src="/wp-content/uploads/2024/photo.jpg">'
        assert detect_platform(html, 500) == "wordpress"

    def test_wp_generator_meta(self):
        html = '<meta name="generator" content="WordPress 6.4.2">'
        assert detect_platform(html, 80) == "wordpress"

    def test_wordpress_takes_priority_over_spa_markers(self):
        html = '/wp-content/themes/mysite/style.css<div id="root"></div>'
        assert detect_platform(html, 0) == "wordpress"


class TestDetectSPA:
    def test_react_root_with_thin_content(self):
        assert detect_platform(_spa_html('<div id="root"></div>'), 0) == "spa"

    def test_nuxt_mount_with_thin_content(self):
        assert detect_platform(_spa_html('<div id="__nuxt"></div>'), 3) == "spa"

    def test_next_data_script_with_thin_content(self):
        html = _spa_html('<script id="__NEXT_DATA__" type="application/json">{}</script>')
        assert detect_platform(html, 0) == "spa"

    def test_angular_ng_version_with_thin_content(self):
        assert detect_platform(_spa_html('<app-root ng-version="17.0.0"></app-root>'), 0) == "spa"

    def test_spa_marker_exactly_at_threshold_is_ssr(self):
        assert detect_platform(_spa_html('<div id="root"></div>'), SPA_MIN_WORDS) == "ssr"

    def test_thin_content_without_spa_markers_is_ssr(self):
        assert detect_platform("<html><body><p>Hi</p></body></html>", 1) == "ssr"


class TestDetectSSR:
    def test_empty_html_is_ssr(self):
        assert detect_platform("", 0) == "ssr"

    def test_large_page(self):
        html = "<html><body>" + "<p>content</p>" * 100 + "</body></html>"
        assert detect_platform(html, 200) == "ssr"
