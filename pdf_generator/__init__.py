"""
PDF Generator - Dedicated service for rendering web pages to PDF.

This service loads a URL in headless Chromium via Playwright, applies
print-oriented style overrides and returns the page as an A4 PDF. Each
request owns its own browser session for isolation.
"""

__version__ = "1.0.0"
