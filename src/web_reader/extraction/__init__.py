"""
Extraction module for web-reader.

Renders page markup into cleaned, readable markdown.
"""

from web_reader.extraction.renderer import ContentRenderer, clean_markdown

__all__ = [
    "ContentRenderer",
    "clean_markdown",
]
