"""
Render-and-export workflow.

Loads one URL in a fresh headless Chromium session, applies the print
overrides and exports the page as an A4 PDF. Browser and page are scoped
with async context managers so both are released on every exit path,
page first, and a failure closing one never prevents closing the other.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import Browser, Page, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from .config import GeneratorSettings, get_settings
from .errors import BrowserLaunchError, NavigationError, PageClosedError, PDFExportError
from .logger import RequestLogger, get_logger
from .print_styles import (
    MAP_CONTAINER_SELECTOR,
    MAP_IMAGE_SELECTOR,
    PAGE_BREAK_SCRIPT,
    PDF_OVERRIDE_CSS,
    STATIC_MAP_SCRIPT,
)
from .resource_filter import handle_route

# Headless server-side Chromium: no sandbox, no GPU, no /dev/shm
BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-software-rasterizer",
    "--disable-web-security",
    "--disable-features=VizDisplayCompositor",
]

PDF_OPTIONS = {
    "format": "A4",
    "print_background": True,
    "margin": {
        "top": "0.4in",
        "right": "0.4in",
        "bottom": "0.4in",
        "left": "0.4in",
    },
    "scale": 0.85,
}

MISSING_URL_MESSAGE = "No URL provided for PDF generation"


@asynccontextmanager
async def browser_session(settings: GeneratorSettings, log: RequestLogger) -> AsyncIterator[Browser]:
    """
    Launch an isolated Chromium instance owned by a single request.

    Launch failures are fatal and never retried. On exit the browser is
    closed and the Playwright driver stopped; errors there are only logged.
    """
    try:
        playwright = await async_playwright().start()
    except Exception as e:
        raise BrowserLaunchError(f"Failed to start Playwright: {e}") from e

    browser = None
    try:
        try:
            browser = await playwright.chromium.launch(
                headless=True,
                args=BROWSER_ARGS,
                timeout=settings.browser_launch_timeout_ms,
            )
        except Exception as e:
            raise BrowserLaunchError(f"Failed to launch browser: {e}") from e

        log.debug("Browser launched")
        yield browser
    finally:
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                log.warning(f"Error closing browser: {e}")
        try:
            await playwright.stop()
        except Exception as e:
            log.warning(f"Error stopping Playwright: {e}")


@asynccontextmanager
async def open_page(
    browser: Browser,
    settings: GeneratorSettings,
    log: RequestLogger,
) -> AsyncIterator[Page]:
    """
    Open and configure the single page used for rendering.

    Sets default timeouts, the fixed viewport and "screen" media so
    print-only stylesheets do not hide content. On exit the page is closed
    unless it already closed itself.
    """
    page = await browser.new_page(
        viewport={"width": settings.viewport_width, "height": settings.viewport_height}
    )
    try:
        page.set_default_timeout(settings.page_default_timeout_ms)
        page.set_default_navigation_timeout(settings.page_default_timeout_ms)
        await page.emulate_media(media="screen")

        if settings.block_heavy_resources:
            await page.route("**/*", handle_route)

        yield page
    finally:
        try:
            if not page.is_closed():
                await page.close()
        except Exception as e:
            log.warning(f"Error closing page: {e}")


async def navigate_with_retry(
    page: Page,
    url: str,
    settings: GeneratorSettings,
    log: RequestLogger,
) -> int:
    """
    Navigate to url, retrying with a fixed delay between attempts.

    Returns:
        The attempt number that succeeded

    Raises:
        NavigationError: after the last attempt fails, naming the attempt
            count and the last underlying error
    """
    max_attempts = settings.navigation_max_attempts

    def log_failed_attempt(retry_state: RetryCallState) -> None:
        log.warning(
            f"Navigation attempt {retry_state.attempt_number} failed: "
            f"{retry_state.outcome.exception()}"
        )

    succeeded_on = 0
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max_attempts),
            wait=wait_fixed(settings.navigation_retry_delay_seconds),
            retry=retry_if_exception_type(Exception),
            after=log_failed_attempt,
        ):
            with attempt:
                await page.goto(
                    url,
                    wait_until=settings.navigation_wait_until,
                    timeout=settings.navigation_timeout_ms,
                )
                succeeded_on = attempt.retry_state.attempt_number
    except RetryError as e:
        last_error = e.last_attempt.exception()
        raise NavigationError(
            f"Failed to navigate after {max_attempts} attempts: {last_error}",
            attempts=max_attempts,
        ) from last_error

    log.info(f"Navigation successful on attempt {succeeded_on}")
    return succeeded_on


async def wait_for_content(page: Page, settings: GeneratorSettings, log: RequestLogger) -> None:
    """
    Give asynchronous content time to render.

    Pages with a map container additionally wait for the map images; a
    timeout there is tolerated and the export goes ahead.
    """
    await asyncio.sleep(settings.content_settle_seconds)

    if await page.query_selector(MAP_CONTAINER_SELECTOR) is None:
        return

    try:
        await page.wait_for_selector(
            MAP_IMAGE_SELECTOR,
            state="attached",
            timeout=settings.map_wait_timeout_ms,
        )
    except PlaywrightTimeoutError:
        log.warning(
            f"Map images did not appear within {settings.map_wait_timeout_ms}ms, continuing"
        )
    await asyncio.sleep(settings.map_settle_seconds)


async def apply_print_overrides(page: Page, log: RequestLogger) -> None:
    """Inject the print stylesheet and swap interactive maps for static images."""
    await page.add_style_tag(content=PDF_OVERRIDE_CSS)
    swapped = await page.evaluate(STATIC_MAP_SCRIPT)
    log.debug(f"Replaced {swapped} interactive map(s) with static images")


async def apply_page_breaks(page: Page, log: RequestLogger) -> None:
    """Translate data-pdf-break attributes into inline break styles."""
    applied = await page.evaluate(PAGE_BREAK_SCRIPT)
    log.debug(f"Applied {applied} page break directive(s)")


async def wait_until_ready(page: Page, settings: GeneratorSettings) -> None:
    """
    Let layout settle, then wait for the document to report it is loaded.

    wait_for_load_state returns at once when the load event already fired.
    """
    await asyncio.sleep(settings.layout_settle_seconds)
    await page.wait_for_load_state("load")


def ensure_page_open(page: Page) -> None:
    if page.is_closed():
        raise PageClosedError("Page was closed before PDF generation")


async def export_pdf(page: Page, settings: GeneratorSettings, log: RequestLogger) -> bytes:
    """
    Render the current page state to PDF bytes.

    Raises:
        PDFExportError: if the export raises, times out, or returns nothing
    """
    log.info("Starting PDF generation...")
    try:
        pdf_bytes = await asyncio.wait_for(
            page.pdf(**PDF_OPTIONS),
            timeout=settings.pdf_export_timeout_seconds,
        )
    except asyncio.TimeoutError as e:
        raise PDFExportError(
            f"PDF generation failed: timed out after {settings.pdf_export_timeout_seconds}s"
        ) from e
    except Exception as e:
        raise PDFExportError(f"PDF generation failed: {e}") from e

    if not pdf_bytes:
        raise PDFExportError("PDF generation produced empty result")

    log.info(f"PDF generated successfully: {len(pdf_bytes)} bytes")
    return pdf_bytes


async def generate_pdf(
    url: Optional[str],
    settings: Optional[GeneratorSettings] = None,
    request_id: Optional[str] = None,
) -> bytes:
    """
    Render url in a dedicated browser session and return it as PDF.

    Args:
        url: Page to render
        settings: Workflow timeouts and delays (defaults to get_settings())
        request_id: Identifier used to tag log lines

    Returns:
        PDF bytes (never empty)

    Raises:
        PDFGenerationError: any fatal launch, navigation, liveness or export
            failure; the browser session is torn down before it propagates
    """
    settings = settings or get_settings()
    log = get_logger(__name__, request_id)

    if not url or not url.strip():
        raise NavigationError(MISSING_URL_MESSAGE)

    log.info(f"Starting PDF generation for: {url}")

    async with browser_session(settings, log) as browser:
        async with open_page(browser, settings, log) as page:
            await navigate_with_retry(page, url, settings, log)
            await wait_for_content(page, settings, log)
            await apply_print_overrides(page, log)
            await apply_page_breaks(page, log)
            ensure_page_open(page)
            await wait_until_ready(page, settings)
            ensure_page_open(page)
            return await export_pdf(page, settings, log)
