import pytest

from docscan.analysis.fingerprint import (
    INTERNAL_MATCH_ALERT,
    apply_internal_matches,
    find_matches,
    make_fingerprint,
    normalize_text,
    split_sentences,
)
from docscan.analysis.models import AnalysisResult, InternalMatch
from docscan.domain.enums import CheckKind
from docscan.infra.repo_documents import DocumentRepo
from docscan.infra.repo_fingerprints import FingerprintRepo, StoredFingerprint

BIOLOGY = "The mitochondria is the powerhouse of the cell. Photosynthesis converts light into chemical energy. Short one."
GEOLOGY = (
    "PHOTOSYNTHESIS, converts light into chemical energy! "
    "Rivers carve canyons over millions of years. "
    "Wind erodes soft sandstone into arches."
)


def _record(document_id: int, text: str) -> StoredFingerprint:
    return StoredFingerprint(document_id=document_id, fingerprint=make_fingerprint(text), created_at="2026-01-01T00:00:00")


def _numbered(n: int) -> str:
    return " ".join(f"Sentence number {i} talks about topic {i} at length." for i in range(n))


def test_normalize_and_split() -> None:
    assert normalize_text("  Hello,   World!\n") == "hello world"
    assert split_sentences(BIOLOGY) == [
        ("The mitochondria is the powerhouse of the cell", "the mitochondria is the powerhouse of the cell"),
        ("Photosynthesis converts light into chemical energy", "photosynthesis converts light into chemical energy"),
    ]


def test_shared_sentence_matches_regardless_of_case_and_punctuation() -> None:
    (match,) = find_matches(GEOLOGY, [_record(1, BIOLOGY)])

    assert match.document_id == 1
    assert (match.match_percentage, match.match_count) == (33, 1)
    assert match.matched_sentences == ["PHOTOSYNTHESIS, converts light into chemical energy"]


def test_same_text_is_a_full_match() -> None:
    (match,) = find_matches(BIOLOGY.upper(), [_record(7, BIOLOGY)])

    assert match.match_percentage == 100
    assert match.match_count == 2


def test_matches_below_ten_percent_are_ignored() -> None:
    others = [_record(1, _numbered(1))]

    assert find_matches(_numbered(11), others) == []
    assert [m.match_percentage for m in find_matches(_numbered(10), others)] == [10]


def test_best_matches_first_and_at_most_five() -> None:
    others = [_record(i, _numbered(i)) for i in range(1, 8)]

    matches = find_matches(_numbered(10), others)

    assert [m.document_id for m in matches] == [7, 6, 5, 4, 3]
    assert [m.match_percentage for m in matches] == [70, 60, 50, 40, 30]


def test_empty_text_matches_nothing() -> None:
    assert find_matches("  ...  ", [_record(1, "")]) == []


def _plagiarism_result(score: float, verdict: str) -> AnalysisResult:
    return AnalysisResult(
        check_kind=CheckKind.plagiarism,
        findings=[],
        counts={},
        overall_score=score,
        verdict=verdict,
        summary="No significant plagiarism detected.",
        sampled_units=1,
    )


def _match(percentage: int) -> InternalMatch:
    return InternalMatch(
        document_id=1, match_percentage=percentage, match_count=1, matched_sentences=["x"], uploaded_at="t"
    )


def test_internal_match_raises_score_and_verdict() -> None:
    result = apply_internal_matches(_plagiarism_result(12.0, "original"), [_match(60), _match(20)])

    assert result.overall_score == 60.0
    assert result.verdict == "high"
    assert result.summary.endswith(INTERNAL_MATCH_ALERT)
    assert [m.match_percentage for m in result.internal_matches] == [60, 20]


def test_lower_internal_match_keeps_score() -> None:
    result = apply_internal_matches(_plagiarism_result(40.0, "moderate"), [_match(25)])

    assert (result.overall_score, result.verdict) == (40.0, "moderate")
    assert result.summary.endswith(INTERNAL_MATCH_ALERT)


def test_no_matches_leave_result_untouched() -> None:
    original = _plagiarism_result(12.0, "original")

    assert apply_internal_matches(original, []) is original


def _document_id(conn, name: str) -> int:
    return DocumentRepo(conn).create(
        filename=name, mime_type="text/plain", file_path="/dev/null", sha256="0" * 64, size_bytes=1
    ).id


def test_repo_upsert_keeps_first_created_at(conn) -> None:
    repo = FingerprintRepo(conn)
    doc_id = _document_id(conn, "a.txt")

    first = repo.upsert(doc_id, make_fingerprint(BIOLOGY))
    second = repo.upsert(doc_id, make_fingerprint(GEOLOGY))

    assert second.created_at == first.created_at
    assert second.fingerprint == make_fingerprint(GEOLOGY)


def test_repo_lists_other_documents_only(conn) -> None:
    repo = FingerprintRepo(conn)
    a = _document_id(conn, "a.txt")
    b = _document_id(conn, "b.txt")
    repo.upsert(a, make_fingerprint(BIOLOGY))
    repo.upsert(b, make_fingerprint(GEOLOGY))

    assert [r.document_id for r in repo.list_excluding(a)] == [b]
    assert len(repo.list_excluding(a, limit=0)) == 0
    with pytest.raises(KeyError):
        repo.get(999)
