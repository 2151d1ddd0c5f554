"""
Error taxonomy for the render-and-export workflow.

Every fatal failure raised by the workflow derives from PDFGenerationError
and carries a category so the server logs can tell failures apart, while the
HTTP layer reports all of them with one uniform payload.
"""


class PDFGenerationError(Exception):
    """Base class for fatal PDF generation failures."""

    category = "unexpected"


class BrowserLaunchError(PDFGenerationError):
    """Browser session could not be started (never retried)."""

    category = "launch"


class NavigationError(PDFGenerationError):
    """Target URL missing, unreachable or never reached the load condition."""

    category = "navigation"

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class PageClosedError(PDFGenerationError):
    """Page handle closed (crash or navigated away) before export."""

    category = "liveness"


class PDFExportError(PDFGenerationError):
    """PDF export raised, timed out, or produced an empty result."""

    category = "export"


def error_category(exc: BaseException) -> str:
    """Return the log category for any exception raised during generation."""
    return getattr(exc, "category", PDFGenerationError.category)
