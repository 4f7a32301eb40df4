"""
Final text assembly: truncation, URL header and console section.
"""

from typing import Sequence

from web_reader.session.models import ConsoleRecord, SessionResult

HEADER_RULE = "=" * 26
CONSOLE_RULE = "=" * 50


def truncation_notice(limit: int, original_length: int) -> str:
    return (
        f"\n\n... (output truncated after {limit} chars, "
        f"full content was {original_length} chars)"
    )


def truncate_content(text: str, limit: int) -> tuple[str, bool]:
    """
    Cut text down to `limit` characters and append a notice.

    Args:
        text: Full content
        limit: Maximum number of content characters (> 0)

    Returns:
        (content, truncated). When truncated, the content is the first
        `limit` characters followed by a notice naming the limit and the
        original length; otherwise it is the text unchanged.
    """
    if limit <= 0:
        raise ValueError("limit must be positive")
    if len(text) <= limit:
        return text, False
    return text[:limit] + truncation_notice(limit, len(text)), True


def format_console_section(records: Sequence[ConsoleRecord]) -> str:
    """
    Render console records as a delimited block.

    Returns an empty string when there are no records.
    """
    if not records:
        return ""
    lines = [CONSOLE_RULE, "CONSOLE OUTPUT:", CONSOLE_RULE]
    lines.extend(record.format() for record in records)
    return "\n".join(lines) + "\n"


def build_report(result: SessionResult, raw: bool = False, header: bool = True) -> str:
    """
    Assemble the text printed for a successful run.

    Rendered output is framed by the fetched URL; raw markup is emitted
    as is. The console section follows either form when non-empty.

    Args:
        result: Completed session result
        raw: Whether the content is raw markup
        header: Whether to prefix rendered output with the URL header

    Returns:
        The final text
    """
    if raw or not header:
        text = result.content
    else:
        text = f"{HEADER_RULE}\n{result.url}\n{HEADER_RULE}\n\n{result.content}"

    console = format_console_section(result.console)
    if console:
        text += "\n\n" + console

    return text
