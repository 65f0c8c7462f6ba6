"""Text processing components for novelshelf.

This package turns fetched plain text into addressable chapters.
"""

from .segmenter import ChapterSegmenter, select_chapter, split_fragments

__all__ = ["ChapterSegmenter", "select_chapter", "split_fragments"]
