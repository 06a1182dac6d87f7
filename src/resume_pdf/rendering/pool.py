"""Long-lived headless Chromium shared by every render.

The pool holds at most one browser process and one browser context. Pages are
leased from that context and must be handed back with ``release_page``. The
process is launched on first use, recreated if it has died, and closed after
``idle_timeout`` seconds without an acquisition.
"""

from __future__ import annotations

import asyncio
import gc
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable

from tenacity import retry, retry_if_not_exception_type, stop_after_attempt

from resume_pdf.config import RendererConfig
from resume_pdf.errors import PDFGenerationError, PoolUnavailableError
from resume_pdf.rendering.network import NetworkPolicy

logger = logging.getLogger(__name__)

BrowserFactory = Callable[[], Awaitable[Any]]

_CLEAR_PAGE_JS = """() => {
    if (document.body) { document.body.innerHTML = ''; }
    if (window.gc) { window.gc(); }
}"""


class RendererPool:
    """Single-instance pool around one browser process and one context."""

    def __init__(
        self,
        config: RendererConfig | None = None,
        *,
        network_policy: NetworkPolicy | None = None,
        browser_factory: BrowserFactory | None = None,
    ):
        self.config = config or RendererConfig()
        self.network_policy = network_policy or NetworkPolicy()
        self._browser_factory = browser_factory
        self._playwright: Any = None
        self._browser: Any = None
        self._context: Any = None
        self._lock = asyncio.Lock()
        self._leased: set[Any] = set()
        self._pending = 0
        self._shutting_down = False
        self._closing: asyncio.Event | None = None
        self._idle_handle: asyncio.TimerHandle | None = None
        self._idle_task: asyncio.Task | None = None
        self.last_used = time.monotonic()

    # -- leasing ---------------------------------------------------------

    async def acquire_page(self) -> Any:
        """Lease a fresh page with the viewport and network policy applied."""
        if self._shutting_down:
            raise PoolUnavailableError("Renderer pool is shutting down")
        if self._closing is not None:
            # idle teardown in progress; let it finish, then relaunch
            await self._closing.wait()
            if self._shutting_down:
                raise PoolUnavailableError("Renderer pool is shutting down")

        self._pending += 1
        try:
            page = await self._open_page()
            self._leased.add(page)
        except PDFGenerationError:
            raise
        except Exception as exc:
            raise PDFGenerationError(
                f"Renderer process unavailable: {exc}", context="acquire_page"
            ) from exc
        finally:
            self._pending -= 1

        self.last_used = time.monotonic()
        self._reset_idle_timer()
        return page

    async def release_page(self, page: Any) -> None:
        """Clear and close a leased page. Never raises."""
        self._leased.discard(page)
        try:
            await page.evaluate(_CLEAR_PAGE_JS)
        except Exception as exc:
            logger.warning("Error clearing page: %s", exc)
        try:
            await page.close()
        except Exception as exc:
            logger.warning("Error closing page: %s", exc)
        gc.collect()

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Any]:
        """``async with pool.page() as page:`` acquire/release pair."""
        leased = await self.acquire_page()
        try:
            yield leased
        finally:
            await self.release_page(leased)

    @retry(
        stop=stop_after_attempt(2),
        retry=retry_if_not_exception_type(PoolUnavailableError),
        reraise=True,
    )
    async def _open_page(self) -> Any:
        async with self._lock:
            if self._shutting_down:
                raise PoolUnavailableError("Renderer pool is shutting down")
            try:
                await self._ensure_browser()
                page = await self._context.new_page()
            except Exception:
                logger.warning("Renderer process unusable, recreating", exc_info=True)
                await self._teardown()
                raise

        try:
            await page.set_viewport_size(
                {"width": self.config.viewport_width, "height": self.config.viewport_height}
            )
            await self.network_policy.apply(page)
        except Exception:
            try:
                await page.close()
            except Exception as exc:
                logger.warning("Error closing page: %s", exc)
            raise
        return page

    # -- process lifecycle ------------------------------------------------

    async def _ensure_browser(self) -> None:
        if self._browser is not None and not self._browser.is_connected():
            logger.info("Renderer process is gone, relaunching")
            await self._teardown()
        if self._browser is None:
            self._browser = await self._launch_browser()
        if self._context is None:
            self._context = await self._browser.new_context(
                viewport={
                    "width": self.config.viewport_width,
                    "height": self.config.viewport_height,
                },
                device_scale_factor=1,
                ignore_https_errors=True,
                offline=True,
            )
            logger.debug("Created browser context")

    async def _launch_browser(self) -> Any:
        if self._browser_factory is not None:
            return await self._browser_factory()

        from playwright.async_api import async_playwright

        self._playwright = await async_playwright().start()
        logger.debug("Launching headless Chromium")
        return await self._playwright.chromium.launch(
            headless=self.config.headless,
            args=list(self.config.launch_args),
        )

    async def _teardown(self) -> None:
        """Close context, then browser, then the driver. Caller holds the lock."""
        context, self._context = self._context, None
        browser, self._browser = self._browser, None
        driver, self._playwright = self._playwright, None

        if context is not None:
            try:
                await context.close()
            except Exception as exc:
                logger.warning("Error closing browser context: %s", exc)
        if browser is not None:
            try:
                await browser.close()
            except Exception as exc:
                logger.warning("Error closing browser: %s", exc)
        if driver is not None:
            try:
                await driver.stop()
            except Exception as exc:
                logger.warning("Error stopping playwright: %s", exc)

    async def shutdown(self) -> None:
        """Close the context and process. Idempotent and safe to call concurrently.

        While it runs, ``acquire_page`` raises PoolUnavailableError. Once it has
        finished the pool can be used again and will relaunch lazily.
        """
        await self._close(explicit=True)

    async def _close(self, explicit: bool) -> None:
        if self._closing is not None:
            await self._closing.wait()
            return
        closing = self._closing = asyncio.Event()
        self._shutting_down = explicit
        self._cancel_idle_timer()
        try:
            async with self._lock:
                if not explicit and self._in_use():
                    # an acquisition got in while this close waited for the lock
                    logger.debug("Renderer in use again, idle close skipped")
                    self._reset_idle_timer()
                    return
                await self._teardown()
            logger.debug("Renderer pool closed (%s)", "shutdown" if explicit else "idle")
        finally:
            self._shutting_down = False
            self._closing = None
            closing.set()

    # -- idle timer ---------------------------------------------------------

    def _reset_idle_timer(self) -> None:
        self._cancel_idle_timer()
        loop = asyncio.get_running_loop()
        self._idle_handle = loop.call_later(self.config.idle_timeout, self._on_idle)

    def _cancel_idle_timer(self) -> None:
        if self._idle_handle is not None:
            self._idle_handle.cancel()
            self._idle_handle = None

    def _on_idle(self) -> None:
        self._idle_handle = None
        if self._in_use():
            self._reset_idle_timer()
            return
        logger.debug("Renderer idle for %.1fs, closing", self.config.idle_timeout)
        self._idle_task = asyncio.ensure_future(self._close(explicit=False))

    # -- introspection --------------------------------------------------------

    def _in_use(self) -> bool:
        return bool(self._leased) or self._pending > 0

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    def is_alive(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    def stats(self) -> dict:
        return {
            "has_browser": self._browser is not None,
            "has_context": self._context is not None,
            "leased_pages": len(self._leased),
            "pending_acquisitions": self._pending,
            "last_used": self.last_used,
            "idle_seconds": time.monotonic() - self.last_used,
        }
