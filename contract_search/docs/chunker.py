"""Document chunker - fixed-size character slicing."""

from contract_search.errors import ValidationError

CHUNK_SIZE = 1000
CHUNK_THRESHOLD = 1000


def split_content(
    content: str,
    *,
    chunk_size: int = CHUNK_SIZE,
    threshold: int = CHUNK_THRESHOLD,
) -> list[tuple[int, str]]:
    """Split document text into ordered fixed-size chunks.

    Pure function with no I/O or randomness. Slicing is by raw character
    count, so a chunk may end mid-word.

    Args:
        content: Full document text
        chunk_size: Characters per chunk (default 1000)
        threshold: Content at or below this length is not chunked

    Returns:
        List of (chunk_index, chunk_text) tuples where:
        - chunk_index is 0-based and contiguous
        - every chunk but the last has exactly chunk_size characters
        - concatenating chunk texts in index order reproduces content
        Empty when len(content) <= threshold.

    Raises:
        ValidationError: If chunk_size is not positive
    """
    if chunk_size <= 0:
        raise ValidationError(f"chunk_size must be positive, got {chunk_size}")

    if len(content) <= threshold:
        return []

    return [
        (index, content[start : start + chunk_size])
        for index, start in enumerate(range(0, len(content), chunk_size))
    ]
