"""Top-level package for novelshelf.

This package searches a public-domain book catalog, normalizes its records
into `Work` values, and splits fetched plain text into readable chapters. The
main entry points are `CatalogClient`, `SearchSession`, and `ChapterSegmenter`.
"""

from .catalog import CatalogClient, SearchSession
from .text import ChapterSegmenter

__all__ = ["CatalogClient", "ChapterSegmenter", "SearchSession", "__version__"]

__version__ = "0.1.0"
