"""
HTML to markdown rendering.

Turns the page markup into compact markdown suitable for reading by a
language model: non-content tags are dropped, the rest is converted
with markdownify and the result is tidied up.
"""

import re

from bs4 import BeautifulSoup
from markdownify import ATX, markdownify

from web_reader.core.exceptions import ExtractionError
from web_reader.utils.logging import get_logger

logger = get_logger(__name__)

_BLANK_RUNS = re.compile(r"\n{3,}")
_BULLET = re.compile(r"^(\s*)[*+-] ")


def clean_markdown(markdown: str) -> str:
    """
    Tidy converted markdown.

    - Strips trailing whitespace from every line
    - Normalises "*", "+" and "-" list bullets to "- "
    - Collapses runs of blank lines into one
    - Trims the whole text

    Args:
        markdown: Raw converter output

    Returns:
        Cleaned markdown
    """
    lines = [
        _BULLET.sub(r"\1- ", line.rstrip())
        for line in markdown.splitlines()
    ]
    text = "\n".join(lines)
    text = _BLANK_RUNS.sub("\n\n", text)
    return text.strip()


class ContentRenderer:
    """
    Converts page markup into cleaned markdown.

    Example:
        >>> renderer = ContentRenderer()
        >>> renderer.render("<h1>Title</h1><p>Body</p>")
        '# Title\\n\\nBody'
    """

    # Tags whose content never carries readable text
    REMOVE_TAGS = ["script", "style", "noscript", "template", "svg"]

    def __init__(self, remove_tags: list[str] | None = None) -> None:
        self.remove_tags = remove_tags if remove_tags is not None else list(
            self.REMOVE_TAGS)

    def render(self, html: str) -> str:
        """
        Render HTML as markdown.

        Args:
            html: Page markup

        Returns:
            Cleaned markdown text

        Raises:
            ExtractionError: If the markup cannot be converted
        """
        try:
            soup = BeautifulSoup(html, "html.parser")
            for element in soup.find_all(self.remove_tags):
                element.decompose()

            markdown = markdownify(
                str(soup),
                heading_style=ATX,
                bullets="-",
            )
        except Exception as e:
            raise ExtractionError(f"Could not convert HTML to text: {e}") from e

        text = clean_markdown(markdown)
        logger.debug(f"Rendered {len(html)} chars of HTML into {len(text)} chars")
        return text
