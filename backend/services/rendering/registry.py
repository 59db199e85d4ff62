"""Lazy renderer registry: one instance per (name, format), created on first use."""

import logging

from services.rendering.base import BaseRenderer

logger = logging.getLogger(__name__)

# Preferred strategy order per output format
STRATEGIES: dict[str, tuple[str, ...]] = {
    "pdf": ("reportlab", "fallback"),
    "docx": ("python-docx", "fallback"),
}

_registry: dict[tuple[str, str], BaseRenderer] = {}


def _create_renderer(name: str, fmt: str) -> BaseRenderer:
    """Factory: create a renderer by name with deferred imports."""
    if name == "reportlab":
        from services.rendering.pdf_renderer import ReportLabPdfRenderer
        return ReportLabPdfRenderer(fmt)
    elif name == "python-docx":
        from services.rendering.docx_renderer import DocxRenderer
        return DocxRenderer(fmt)
    elif name == "fallback":
        from services.rendering.fallback_renderer import FallbackRenderer
        return FallbackRenderer(fmt)
    else:
        raise ValueError(f"Unknown renderer: {name}")


def get_renderer(name: str, fmt: str = "pdf") -> BaseRenderer:
    """Get a renderer by name for a format, creating it on first access."""
    key = (name, fmt)
    if key not in _registry:
        logger.info("Creating renderer %s for %s", name, fmt)
        _registry[key] = _create_renderer(name, fmt)
    return _registry[key]


def strategies_for(fmt: str) -> list[BaseRenderer]:
    """Ordered rendering strategies for an output format."""
    if fmt not in STRATEGIES:
        raise ValueError(f"Unsupported format: {fmt}")
    return [get_renderer(name, fmt) for name in STRATEGIES[fmt]]


def clear() -> None:
    """Drop all cached renderers. Useful for testing."""
    _registry.clear()
