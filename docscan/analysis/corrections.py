from docscan.analysis.errors import OverlappingCorrectionsError
from docscan.analysis.models import Finding


def apply_corrections(original_text: str, findings: list[Finding]) -> str:
    """Replace every finding's span with its suggestion.

    Spans are applied from the highest start index down, so a replacement never shifts
    the offsets of the ones still to be applied. Overlapping spans are rejected rather
    than applied against already-rewritten text.
    """
    ordered = sorted(findings, key=lambda f: f.start_index, reverse=True)
    _validate(original_text, ordered)

    text = original_text
    for f in ordered:
        replacement = f.suggestion if f.suggestion is not None else f.text
        text = text[: f.start_index] + replacement + text[f.end_index :]
    return text


def select_findings(findings: list[Finding], accepted: list[int] | None) -> list[Finding]:
    if accepted is None:
        return list(findings)
    selected: list[Finding] = []
    for idx in sorted(set(accepted)):
        if idx < 0 or idx >= len(findings):
            raise IndexError(f"finding index out of range: {idx}")
        selected.append(findings[idx])
    return selected


def _validate(text: str, descending: list[Finding]) -> None:
    for f in descending:
        if not 0 <= f.start_index < f.end_index <= len(text):
            raise ValueError(f"finding span out of bounds: {f.start_index}-{f.end_index}")
        if text[f.start_index : f.end_index] != f.text:
            raise ValueError(f"finding text does not match document at {f.start_index}-{f.end_index}")

    for higher, lower in zip(descending, descending[1:]):
        if lower.end_index > higher.start_index:
            raise OverlappingCorrectionsError(
                (lower.start_index, lower.end_index),
                (higher.start_index, higher.end_index),
            )
