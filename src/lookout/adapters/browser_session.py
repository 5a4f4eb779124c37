"""Single-run Playwright browser session.

One Chromium process, one isolated context and one page per invocation. The
launch flags target constrained sandboxed hosts (Lambda-style containers):
no GPU, no /dev/shm, no OS sandbox, single process.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from ..core.errors import SessionError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from ..core.context import RunContext

logger = logging.getLogger(__name__)

BROWSER_ARGS: tuple[str, ...] = (
    "--disable-gpu",
    "--disable-dev-shm-usage",
    "--disable-setuid-sandbox",
    "--no-sandbox",
    "--single-process",
    "--no-zygote",
    "--ignore-certificate-errors",
)


@dataclass
class BrowserSession:
    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page
    release_error: str | None = None


class BrowserSessionManager:
    """Acquire and release exactly one browser session.

    Usage:
        manager = BrowserSessionManager()
        async with manager.open_session(ctx) as session:
            await session.page.goto(...)
    """

    def __init__(self, playwright_factory: Callable[[], Any] = async_playwright) -> None:
        self._playwright_factory = playwright_factory

    def launch_args(self, ctx: RunContext) -> list[str]:
        args = list(BROWSER_ARGS)
        args.extend(a for a in ctx.extra_args if a not in args)
        return args

    async def acquire(self, ctx: RunContext) -> BrowserSession:
        try:
            playwright = await self._playwright_factory().start()
        except Exception as e:
            raise SessionError("launch_browser", f"Playwright failed to start: {e}") from e

        browser = None
        try:
            browser = await playwright.chromium.launch(
                headless=ctx.headless,
                args=self.launch_args(ctx),
                executable_path=ctx.executable_path,
            )
            width, height = ctx.viewport
            context = await browser.new_context(
                viewport={"width": width, "height": height},
                user_agent=ctx.user_agent or None,
                ignore_https_errors=True,
            )
            page = await context.new_page()
            page.set_default_navigation_timeout(ctx.navigation_timeout_ms)
        except Exception as e:
            logger.error("[Session] Browser launch failed: %s", e)
            await self._close_quietly(browser, playwright)
            raise SessionError("launch_browser", f"Browser launch failed: {e}") from e

        logger.info("[Session] Browser ready (headless=%s)", ctx.headless)
        return BrowserSession(playwright=playwright, browser=browser, context=context, page=page)

    async def release(self, session: BrowserSession) -> str | None:
        """Close the browser and stop the driver. Never raises."""
        error: str | None = None
        try:
            await session.browser.close()
        except Exception as e:
            logger.error("[Session] Error closing browser: %s", e)
            error = str(e)
        try:
            await session.playwright.stop()
        except Exception as e:
            logger.error("[Session] Error stopping Playwright: %s", e)
            error = error or str(e)
        session.release_error = error
        return error

    @asynccontextmanager
    async def open_session(self, ctx: RunContext) -> AsyncGenerator[BrowserSession, None]:
        session = await self.acquire(ctx)
        try:
            yield session
        finally:
            await self.release(session)

    async def _close_quietly(self, browser: Browser | None, playwright: Playwright) -> None:
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                logger.warning("[Session] Error closing partially launched browser: %s", e)
        try:
            await playwright.stop()
        except Exception as e:
            logger.warning("[Session] Error stopping Playwright: %s", e)
