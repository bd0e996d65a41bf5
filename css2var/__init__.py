"""Extract CSS/SCSS property values into global CSS custom properties."""

from .config import RunOptions, load_config, resolve_options
from .orchestrator import ExtractionError, ExtractionResult, Extractor

__all__ = [
    "ExtractionError",
    "ExtractionResult",
    "Extractor",
    "RunOptions",
    "load_config",
    "resolve_options",
]
