"""Query highlighting for result display."""

import re

from contract_search.models.docs import HighlightSpan


def compile_query_pattern(query: str) -> re.Pattern[str] | None:
    """Compile a case-insensitive literal pattern for query.

    Returns:
        Compiled pattern, or None when query is empty or no valid
        pattern can be built from it
    """
    if not query:
        return None

    try:
        return re.compile(f"({re.escape(query)})", re.IGNORECASE)
    except re.error:
        return None


def highlight(text: str, query: str) -> list[HighlightSpan]:
    """Split text into plain and matched spans for query.

    Matching is a case-insensitive literal substring search; regex
    metacharacters in query are matched verbatim. Spans cover text
    exactly, in order, and keep the original casing.

    Args:
        text: Text to highlight
        query: Search query

    Returns:
        Alternating plain/matched spans. A single plain span holding the
        whole text when text or query is empty or no pattern can be built.
    """
    pattern = compile_query_pattern(query)
    if not text or pattern is None:
        return [HighlightSpan(text=text, matched=False)]

    # split() with one capture group puts matches at odd positions
    parts = pattern.split(text)
    return [
        HighlightSpan(text=part, matched=position % 2 == 1)
        for position, part in enumerate(parts)
        if part
    ]


def excerpt(text: str, max_chars: int = 300) -> str:
    """Truncate text for display, marking the cut with an ellipsis."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."
