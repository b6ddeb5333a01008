from docscan.analysis.models import Chunk

_SENTENCE_END = ". "


def chunk_text(text: str, max_length: int) -> list[Chunk]:
    """Split text into contiguous chunks of at most ``max_length`` characters.

    Cut preference, searching backward from the cutoff:
    - after a sentence end (". "), unless it falls in the first half of the window; a
      period in the last position is cut after, leaving its space to the next chunk;
    - after the last whitespace character;
    - a hard cut at ``max_length``.

    The delimiter stays with the chunk it ends, so ``"".join(c.text for c in chunks) == text``.
    """
    if max_length <= 0:
        raise ValueError(f"max_length must be positive, got {max_length}")

    chunks: list[Chunk] = []
    offset = 0
    remaining = text

    while len(remaining) > max_length:
        cut = _split_point(remaining, max_length)
        chunks.append(Chunk(text=remaining[:cut], document_offset=offset))
        offset += cut
        remaining = remaining[cut:]

    if remaining:
        chunks.append(Chunk(text=remaining, document_offset=offset))

    return chunks


def _split_point(text: str, max_length: int) -> int:
    # One character of lookahead so a period in the last window position still counts.
    dot = text[: max_length + 1].rfind(_SENTENCE_END)
    if dot != -1 and dot >= max_length / 2:
        return min(dot + len(_SENTENCE_END), max_length)

    window = text[:max_length]
    for i in range(len(window) - 1, -1, -1):
        if window[i].isspace():
            return i + 1

    return max_length


def count_words(text: str) -> int:
    return len(text.split())
