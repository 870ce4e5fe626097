#!/usr/bin/env python3
"""Tests for benchreport/lib/browser.py — PlaywrightWeb and element_handle.

Playwright objects are replaced with unittest.mock doubles; no browser is
launched.
"""

from __future__ import annotations

import sys
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

_repo = Path(__file__).resolve().parent.parent
if str(_repo) not in sys.path:
    sys.path.insert(0, str(_repo))

from benchreport.lib.browser import (
    DEFAULT_VIEWPORT,
    NodeNotFoundError,
    PlaywrightWeb,
    ReportReaderError,
    element_handle,
)


def _fake_driver():
    """Return (async_playwright factory, driver, browser, page) mocks."""
    page = MagicMock()
    page.goto = AsyncMock()
    page.wait_for_function = AsyncMock()
    page.query_selector = AsyncMock()
    page.evaluate = AsyncMock(return_value="Total: 42ms")
    page.close = AsyncMock()

    browser = MagicMock()
    browser.new_page = AsyncMock(return_value=page)
    browser.close = AsyncMock()

    driver = MagicMock()
    driver.chromium.launch = AsyncMock(return_value=browser)
    driver.stop = AsyncMock()

    starter = MagicMock()
    starter.start = AsyncMock(return_value=driver)
    factory = MagicMock(return_value=starter)
    return factory, driver, browser, page


# ---------------------------------------------------------------------------
# element_handle
# ---------------------------------------------------------------------------

class TestElementHandle(unittest.IsolatedAsyncioTestCase):
    async def test_yields_and_disposes(self):
        handle = object()
        web = MagicMock()
        web.query_selector = AsyncMock(return_value=handle)
        web.dispose = AsyncMock()

        async with element_handle(web, "body > div > div") as h:
            self.assertIs(h, handle)
            web.dispose.assert_not_awaited()
        web.dispose.assert_awaited_once_with(handle)

    async def test_disposes_when_body_raises(self):
        handle = object()
        web = MagicMock()
        web.query_selector = AsyncMock(return_value=handle)
        web.dispose = AsyncMock()

        with self.assertRaises(ValueError):
            async with element_handle(web, "body > div > div"):
                raise ValueError("read failed")
        web.dispose.assert_awaited_once_with(handle)

    async def test_no_match_raises_without_dispose(self):
        web = MagicMock()
        web.query_selector = AsyncMock(return_value=None)
        web.dispose = AsyncMock()

        with self.assertRaises(NodeNotFoundError) as ctx:
            async with element_handle(web, "body > div > div"):
                self.fail("body must not run")
        self.assertIn("body > div > div", str(ctx.exception))
        self.assertIsInstance(ctx.exception, ReportReaderError)
        web.dispose.assert_not_awaited()


# ---------------------------------------------------------------------------
# PlaywrightWeb
# ---------------------------------------------------------------------------

class TestPlaywrightWebInit(unittest.IsolatedAsyncioTestCase):
    async def test_page_before_init_raises(self):
        web = PlaywrightWeb()
        with self.assertRaises(ReportReaderError):
            await web.goto("file:///tmp/benchmark.html")

    async def test_init_launches_headless_chromium(self):
        factory, driver, browser, page = _fake_driver()
        with patch("playwright.async_api.async_playwright", factory):
            web = PlaywrightWeb()
            await web.init()

        launch_kwargs = driver.chromium.launch.await_args.kwargs
        self.assertTrue(launch_kwargs["headless"])
        self.assertIn("--no-sandbox", launch_kwargs["args"])
        self.assertNotIn("proxy", launch_kwargs)
        browser.new_page.assert_awaited_once_with(viewport=DEFAULT_VIEWPORT)
        self.assertIs(web.page, page)

    async def test_init_passes_options(self):
        factory, driver, browser, _ = _fake_driver()
        with patch("playwright.async_api.async_playwright", factory):
            web = PlaywrightWeb(
                headless=False,
                user_agent="bench/1.0",
                proxy={"server": "http://proxy:3128"},
            )
            await web.init()

        launch_kwargs = driver.chromium.launch.await_args.kwargs
        self.assertFalse(launch_kwargs["headless"])
        self.assertEqual(launch_kwargs["proxy"], {"server": "http://proxy:3128"})
        self.assertEqual(browser.new_page.await_args.kwargs["user_agent"], "bench/1.0")

    async def test_init_twice_opens_one_page(self):
        factory, _, browser, _ = _fake_driver()
        with patch("playwright.async_api.async_playwright", factory):
            web = PlaywrightWeb()
            await web.init()
            await web.init()
        browser.new_page.assert_awaited_once()

    async def test_context_manager_closes_lifo(self):
        factory, driver, browser, page = _fake_driver()
        order = []
        page.close.side_effect = lambda: order.append("page")
        browser.close.side_effect = lambda: order.append("browser")
        driver.stop.side_effect = lambda: order.append("playwright")

        with patch("playwright.async_api.async_playwright", factory):
            async with PlaywrightWeb() as web:
                self.assertIs(web.page, page)

        self.assertEqual(order, ["page", "browser", "playwright"])
        with self.assertRaises(ReportReaderError):
            _ = web.page

    async def test_close_tolerates_errors(self):
        factory, driver, browser, page = _fake_driver()
        page.close.side_effect = RuntimeError("Target closed")
        with patch("playwright.async_api.async_playwright", factory):
            web = PlaywrightWeb()
            await web.init()
            await web.close()
        browser.close.assert_awaited_once()
        driver.stop.assert_awaited_once()


class TestPlaywrightWebOps(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        factory, _, _, self.page = _fake_driver()
        with patch("playwright.async_api.async_playwright", factory):
            self.web = PlaywrightWeb()
            await self.web.init()

    async def test_goto(self):
        await self.web.goto("file:///tmp/benchmark.html")
        self.page.goto.assert_awaited_once_with("file:///tmp/benchmark.html")

    async def test_wait_for_text_checks_body(self):
        await self.web.wait_for_text("Benchmark Report", 90_000)
        call = self.page.wait_for_function.await_args
        self.assertIn("document.body.innerText.includes", call.args[0])
        self.assertEqual(call.kwargs["arg"], "Benchmark Report")
        self.assertEqual(call.kwargs["timeout"], 90_000)

    async def test_wait_for_text_raises_timeout(self):
        self.page.wait_for_function.side_effect = TimeoutError("Timeout 10ms exceeded.")
        with self.assertRaises(TimeoutError):
            await self.web.wait_for_text("Benchmark Report", 10)

    async def test_query_selector(self):
        handle = object()
        self.page.query_selector.return_value = handle
        got = await self.web.query_selector("body > div > div")
        self.assertIs(got, handle)
        self.page.query_selector.assert_awaited_once_with("body > div > div")

    async def test_read_text_uses_inner_text(self):
        handle = object()
        text = await self.web.read_text(handle)
        self.assertEqual(text, "Total: 42ms")
        script, target = self.page.evaluate.await_args.args
        self.assertIn("innerText", script)
        self.assertIs(target, handle)

    async def test_dispose(self):
        handle = MagicMock()
        handle.dispose = AsyncMock()
        await self.web.dispose(handle)
        handle.dispose.assert_awaited_once()


if __name__ == "__main__":
    unittest.main()
