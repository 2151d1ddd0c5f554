"""
Sub-resource filtering for page loads.

Decides, per outgoing request, whether the browser should fetch it. Images
and map tile providers are always needed in the PDF; fonts and streaming
media only slow the load down.
"""

from urllib.parse import urlparse

# Map providers whose tiles and static images must render in the PDF
ALLOWED_DOMAINS = (
    "maps.googleapis.com",
    "maps.gstatic.com",
    "api.mapbox.com",
    "tile.openstreetmap.org",
)

# Playwright resource types that are aborted
BLOCKED_RESOURCE_TYPES = frozenset({
    "font",
    "media",
    "websocket",
    "eventsource",
    "texttrack",
})


def is_allowed_domain(url: str) -> bool:
    """
    Check whether a URL belongs to a whitelisted mapping domain.

    Subdomains match as well, e.g. ``a.tile.openstreetmap.org``.
    """
    host = (urlparse(url).hostname or "").lower()
    return any(host == domain or host.endswith("." + domain) for domain in ALLOWED_DOMAINS)


def should_block_request(resource_type: str, url: str) -> bool:
    """
    Classify one outgoing request.

    Args:
        resource_type: Playwright resource type (image, font, media, ...)
        url: Request URL

    Returns:
        True if the request should be aborted
    """
    if resource_type == "image" or is_allowed_domain(url):
        return False
    return resource_type in BLOCKED_RESOURCE_TYPES


async def handle_route(route) -> None:
    """Playwright route handler applying should_block_request."""
    request = route.request
    if should_block_request(request.resource_type, request.url):
        await route.abort()
    else:
        await route.continue_()
