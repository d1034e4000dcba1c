from typing import Literal

from pydantic import BaseModel, HttpUrl

RenderMode = Literal["auto", "http", "browser"]


class AnalyzeRequest(BaseModel):
    url: HttpUrl
    render_mode: RenderMode = "http"
    """How the target page is fetched before analysis.

    ``"http"`` (default)
        Plain HTTP request. Response headers and timing come straight from
        the server, which is what the security and performance checks expect.

    ``"browser"``
        Render with a headless Chromium browser. Use for single-page apps
        whose meta tags and content only exist after JavaScript runs.

    ``"auto"``
        Plain HTTP first; re-fetch with the browser when the page looks like
        an un-rendered SPA shell.
    """
    save: bool = True


class MetaRequest(BaseModel):
    url: HttpUrl
