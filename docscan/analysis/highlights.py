from typing import Protocol, Sequence

from docscan.analysis.models import DisplaySegment, Finding


class Span(Protocol):
    @property
    def text(self) -> str: ...

    @property
    def start_index(self) -> int: ...

    @property
    def end_index(self) -> int: ...


def merge_spans(text: str, spans: Sequence[Span]) -> list[DisplaySegment]:
    """Turn unordered, possibly overlapping spans into consecutive display segments.

    Spans without a usable start offset are located by their excerpt; spans that
    cannot be located are dropped. A span starting inside an already highlighted
    region is skipped whole, so every character is highlighted at most once and
    the segment texts always join back into ``text``.
    """
    resolved: list[tuple[int, int, Span]] = []
    for span in spans:
        bounds = _resolve(text, span)
        if bounds is not None:
            resolved.append((bounds[0], bounds[1], span))

    # list.sort is stable: equal starts keep their input order.
    resolved.sort(key=lambda r: r[0])

    segments: list[DisplaySegment] = []
    cursor = 0
    for start, end, span in resolved:
        if start < cursor:
            continue
        if start > cursor:
            segments.append(DisplaySegment(text=text[cursor:start], is_highlighted=False))
        segments.append(DisplaySegment(text=text[start:end], is_highlighted=True, finding=span))
        cursor = end

    if cursor < len(text):
        segments.append(DisplaySegment(text=text[cursor:], is_highlighted=False))
    return segments


def render_highlights(text: str, findings: Sequence[Finding]) -> list[DisplaySegment]:
    return merge_spans(text, findings)


def _resolve(text: str, span: Span) -> tuple[int, int] | None:
    start = span.start_index
    if 0 <= start < len(text):
        end = span.end_index if start < span.end_index <= len(text) else start + len(span.text)
    else:
        if not span.text:
            return None
        start = text.find(span.text)
        if start < 0:
            return None
        end = start + len(span.text)

    end = min(end, len(text))
    if end <= start:
        return None
    return start, end
