"""Playwright async browser capability for the report reader.

Provides:
- BrowserCapability: the six operations the reader needs from a browser
  (init, goto, wait_for_text, query_selector, read_text, dispose)
- PlaywrightWeb: Chromium implementation via playwright.async_api
- element_handle(): acquire a node handle with guaranteed disposal

Dependencies: playwright (pip install playwright && playwright install chromium)

Usage:
    from benchreport.lib.browser import PlaywrightWeb, element_handle

    async with PlaywrightWeb(headless=True) as web:
        await web.goto("file:///tmp/benchmark.html")
        await web.wait_for_text("Benchmark Report", timeout_ms=90_000)
        async with element_handle(web, "body > div > div") as handle:
            text = await web.read_text(handle)
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Protocol


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_VIEWPORT = {"width": 1280, "height": 800}

# Chromium refuses to start as root in containers without these.
DEFAULT_LAUNCH_ARGS = ("--no-sandbox", "--disable-setuid-sandbox")

_BODY_HAS_TEXT_JS = (
    "text => document.body !== null && document.body.innerText.includes(text)"
)
_INNER_TEXT_JS = "el => el.innerText"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ReportReaderError(RuntimeError):
    """Base error for the report reader."""


class NodeNotFoundError(ReportReaderError):
    """No element matched the report selector."""

    def __init__(self, selector: str):
        super().__init__(f"no element matches selector {selector!r}")
        self.selector = selector


# ---------------------------------------------------------------------------
# Capability interface
# ---------------------------------------------------------------------------

class BrowserCapability(Protocol):
    async def init(self) -> None: ...

    async def goto(self, url: str) -> None: ...

    async def wait_for_text(self, text: str, timeout_ms: int) -> None: ...

    async def query_selector(self, selector: str) -> Optional[Any]: ...

    async def read_text(self, handle: Any) -> str: ...

    async def dispose(self, handle: Any) -> None: ...

    async def close(self) -> None: ...


@asynccontextmanager
async def element_handle(web: BrowserCapability, selector: str) -> AsyncIterator[Any]:
    """Yield the first element matching *selector*, disposing it on exit.

    Raises NodeNotFoundError when nothing matches; no handle is held then,
    so there is nothing to dispose.
    """
    handle = await web.query_selector(selector)
    if handle is None:
        raise NodeNotFoundError(selector)
    try:
        yield handle
    finally:
        await web.dispose(handle)


# ---------------------------------------------------------------------------
# Playwright implementation
# ---------------------------------------------------------------------------

class PlaywrightWeb:
    """Chromium page driven by Playwright, one page per instance.

    Use as an async context manager: entering calls init(), leaving closes
    page, browser and driver (LIFO) with timeouts so exit never hangs.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        viewport: dict[str, int] | None = None,
        user_agent: str = "",
        proxy: dict[str, str] | None = None,
        launch_args: tuple[str, ...] = DEFAULT_LAUNCH_ARGS,
    ):
        self.headless = headless
        self.viewport = viewport or DEFAULT_VIEWPORT
        self.user_agent = user_agent
        self.proxy = proxy
        self.launch_args = launch_args

        # Playwright objects (set in init)
        self._playwright: Any = None
        self._browser: Any = None
        self._page: Any = None

    @property
    def page(self) -> Any:
        if self._page is None:
            raise ReportReaderError("PlaywrightWeb not initialised (call init())")
        return self._page

    async def __aenter__(self) -> "PlaywrightWeb":
        await self.init()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def init(self) -> None:
        """Launch Chromium and open the single page."""
        if self._page is not None:
            return

        from playwright.async_api import async_playwright

        self._playwright = await async_playwright().start()

        launch_opts: dict[str, Any] = {
            "headless": self.headless,
            "args": list(self.launch_args),
        }
        if self.proxy:
            launch_opts["proxy"] = self.proxy
        self._browser = await self._playwright.chromium.launch(**launch_opts)

        page_opts: dict[str, Any] = {"viewport": self.viewport}
        if self.user_agent:
            page_opts["user_agent"] = self.user_agent
        self._page = await self._browser.new_page(**page_opts)

    async def goto(self, url: str) -> None:
        await self.page.goto(url)

    async def wait_for_text(self, text: str, timeout_ms: int) -> None:
        """Block until *text* appears in the rendered body, or raise on timeout."""
        await self.page.wait_for_function(_BODY_HAS_TEXT_JS, arg=text, timeout=timeout_ms)

    async def query_selector(self, selector: str) -> Optional[Any]:
        return await self.page.query_selector(selector)

    async def read_text(self, handle: Any) -> str:
        return await self.page.evaluate(_INNER_TEXT_JS, handle)

    async def dispose(self, handle: Any) -> None:
        await handle.dispose()

    async def close(self) -> None:
        """Close page → browser → playwright (LIFO)."""
        if self._page is not None:
            try:
                await asyncio.wait_for(self._page.close(), timeout=3.0)
            except Exception:
                pass
            self._page = None

        if self._browser is not None:
            try:
                await asyncio.wait_for(self._browser.close(), timeout=5.0)
            except Exception:
                pass
            self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception:
                pass
            self._playwright = None
