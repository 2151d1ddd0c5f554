"""
Print overrides injected into the rendered page before export.

The CSS is tuned for the property report pages this service prints: chrome
and interactive controls disappear, data buttons turn into plain text, and
large sections shrink to fit A4. The scripts run inside the page itself.
"""

# Map container inspected before export; tiles load asynchronously
MAP_CONTAINER_SELECTOR = ".property-map-container"
MAP_IMAGE_SELECTOR = f"{MAP_CONTAINER_SELECTOR} img"

PDF_OVERRIDE_CSS = """
body {
    font-size: 10px !important;
    line-height: 1.2 !important;
    color: #000 !important;
    background: white !important;
    margin: 0 !important;
    padding: 10px !important;
}

.sidebar, .advisor-message-form, .nav-menu, .fa-envelope {
    display: none !important;
}

button:not(.btn-outline-primary):not(.btn-outline-success):not(.no-hide) {
    display: none !important;
}

.btn-outline-primary, .btn-outline-success {
    background: none !important;
    border: none !important;
    color: #000 !important;
    padding: 0 !important;
    margin: 0 !important;
    font-weight: 600 !important;
    font-size: 9px !important;
    text-decoration: none !important;
    display: inline !important;
    cursor: default !important;
    line-height: 1.2 !important;
}

.main-content {
    margin-left: 0 !important;
    width: 100% !important;
    max-width: 100% !important;
}

[data-pdf-break="before"] {
    page-break-before: always !important;
}

[data-pdf-break="after"] {
    page-break-after: always !important;
}

[data-pdf-break-inside="avoid"], [data-pdf-avoid-break] {
    page-break-inside: avoid !important;
}

section, .section {
    margin: 10px 0 !important;
    padding: 10px 0 !important;
    page-break-inside: avoid !important;
}

.hero-section {
    min-height: 280px !important;
    height: 280px !important;
    page-break-after: avoid !important;
}

.hero-bg {
    position: absolute !important;
    top: 0 !important;
    left: 0 !important;
    width: 100% !important;
    height: 100% !important;
    object-fit: cover !important;
    z-index: 1 !important;
}

.hero-content {
    position: relative !important;
    z-index: 10 !important;
}

.table th, .table td {
    padding: 0.3rem 0.6rem !important;
    font-size: 9px !important;
}

#property-images {
    margin: 5px 0 !important;
    padding: 5px 0 !important;
}

.image-grid {
    display: grid !important;
    grid-template-columns: repeat(4, 1fr) !important;
    gap: 5px !important;
    margin: 5px 0 !important;
}

.property-image {
    width: 100% !important;
    height: 80px !important;
    object-fit: cover !important;
    border-radius: 4px !important;
}

/* keep Sources & Uses on the same page as Property Details */
#sources-uses {
    page-break-before: avoid !important;
    margin-top: 10px !important;
}

.interactive-map, .map-loading {
    display: none !important;
}

.property-map-image {
    display: block !important;
    width: 100% !important;
    height: 300px !important;
    object-fit: cover !important;
    border-radius: 8px !important;
}
"""

# Returns the number of elements that received a break directive
PAGE_BREAK_SCRIPT = """
() => {
    let applied = 0;
    document.querySelectorAll('[data-pdf-break]').forEach(el => {
        const value = el.getAttribute('data-pdf-break');
        if (value === 'before') {
            el.style.pageBreakBefore = 'always';
            applied++;
        } else if (value === 'after') {
            el.style.pageBreakAfter = 'always';
            applied++;
        }
    });
    return applied;
}
"""

# Swaps each interactive map for the static image rendered next to it
STATIC_MAP_SCRIPT = """
() => {
    let swapped = 0;
    document.querySelectorAll('.interactive-map').forEach(mapEl => {
        const container = mapEl.closest('.property-map-container');
        const staticImg = container ? container.querySelector('.property-map-image') : null;
        if (staticImg) {
            staticImg.style.display = 'block';
            swapped++;
        }
        mapEl.style.display = 'none';
    });
    return swapped;
}
"""
