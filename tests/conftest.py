"""
Pytest fixtures for PDF generator tests.

Playwright is never launched: async_playwright is patched with a tree of
MagicMock/AsyncMock objects, and settings drop every settle delay to zero.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from pdf_generator.config import GeneratorSettings, get_settings

FAKE_PDF = b"%PDF-1.4 fake pdf content"


@pytest.fixture
def fake_pdf():
    """Bytes returned by the mocked page.pdf."""
    return FAKE_PDF


@pytest.fixture
def fast_settings():
    """Settings with the production timeouts but no sleeping."""
    return GeneratorSettings(
        navigation_retry_delay_seconds=0,
        content_settle_seconds=0,
        map_settle_seconds=0,
        layout_settle_seconds=0,
    )


@pytest.fixture
def mock_page():
    """Page handle that renders successfully."""
    page = AsyncMock()
    # Synchronous Playwright page methods
    page.is_closed = MagicMock(return_value=False)
    page.set_default_timeout = MagicMock()
    page.set_default_navigation_timeout = MagicMock()
    # No map container unless a test adds one
    page.query_selector = AsyncMock(return_value=None)
    page.evaluate = AsyncMock(return_value=0)
    page.pdf = AsyncMock(return_value=FAKE_PDF)
    return page


@pytest.fixture
def mock_browser(mock_page):
    browser = AsyncMock()
    browser.new_page = AsyncMock(return_value=mock_page)
    return browser


@pytest.fixture
def mock_playwright(mock_browser):
    """
    Patch async_playwright in the renderer.

    Yields the Playwright driver mock; its chromium.launch returns
    mock_browser.
    """
    with patch("pdf_generator.renderer.async_playwright") as mock_async_playwright:
        playwright = MagicMock()
        playwright.chromium.launch = AsyncMock(return_value=mock_browser)
        playwright.stop = AsyncMock()
        mock_async_playwright.return_value.start = AsyncMock(return_value=playwright)
        yield playwright


@pytest.fixture
def client(fast_settings):
    """FastAPI test client using zero-delay settings."""
    from pdf_generator.app import app

    app.dependency_overrides[get_settings] = lambda: fast_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(fast_settings):
    """
    In-process async client for tests that keep several requests in flight.
    """
    import httpx

    from pdf_generator.app import app

    app.dependency_overrides[get_settings] = lambda: fast_settings
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http
    app.dependency_overrides.clear()
