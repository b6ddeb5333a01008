import json

from fakes import FakeOracle

from docscan.analysis.chunker import chunk_text
from docscan.analysis.corrections import apply_corrections
from docscan.analysis.orchestrator import AnalysisOrchestrator
from docscan.domain.enums import CheckKind

FIVE_CHUNK_TEXT = "Aaaa. Bbbb. Cccc. Dddd. Eeee."


def _first_word_is_wrong(kind: CheckKind, text: str) -> str:
    word = text[:4]
    return json.dumps({"mistakes": [{"text": word, "type": "spelling", "suggestion": word.lower()}]})


def test_helo_wrld_resolves_and_corrects() -> None:
    text = "Helo wrld. This is fine."
    oracle = FakeOracle(
        lambda kind, chunk: json.dumps(
            {
                "mistakes": [{"text": "Helo wrld", "type": "spelling", "suggestion": "Hello world"}],
                "correctedText": "Hello world. This is fine.",
            }
        )
    )

    result = AnalysisOrchestrator(oracle).analyze(text, CheckKind.grammar, chunk_text(text, 2500), max_chunks=5)

    (finding,) = result.findings
    assert (finding.start_index, finding.end_index) == (0, 9)
    assert finding.category == "spelling"
    assert result.counts == {"spelling": 1}
    assert result.corrected_text == "Hello world. This is fine."
    assert apply_corrections(text, result.findings) == "Hello world. This is fine."


def test_chunk_cap_and_single_chunk_failure() -> None:
    chunks = chunk_text(FIVE_CHUNK_TEXT, 6)
    assert len(chunks) == 5
    oracle = FakeOracle(_first_word_is_wrong, fail_on={2})

    result = AnalysisOrchestrator(oracle).analyze(FIVE_CHUNK_TEXT, CheckKind.grammar, chunks, max_chunks=3)

    assert len(oracle.calls) == 3
    assert [(f.text, f.start_index) for f in result.findings] == [("Aaaa", 0), ("Cccc", 12)]
    assert result.sampled_units == 3
    for f in result.findings:
        assert FIVE_CHUNK_TEXT[f.start_index : f.end_index] == f.text


def test_corrected_text_keeps_failed_and_skipped_chunks_verbatim() -> None:
    chunks = chunk_text(FIVE_CHUNK_TEXT, 6)
    oracle = FakeOracle(
        lambda kind, chunk: json.dumps({"mistakes": [], "correctedText": chunk.upper()}),
        fail_on={2},
    )

    result = AnalysisOrchestrator(oracle).analyze(FIVE_CHUNK_TEXT, CheckKind.grammar, chunks, max_chunks=3)

    assert result.corrected_text == "AAAA. Bbbb. CCCC. Dddd. Eeee."


def test_unreadable_replies_do_not_abort_the_run() -> None:
    replies = iter(["not json", _first_word_is_wrong(CheckKind.grammar, "Bbbb. ")])
    oracle = FakeOracle(lambda kind, chunk: next(replies))

    result = AnalysisOrchestrator(oracle).analyze(
        FIVE_CHUNK_TEXT, CheckKind.grammar, chunk_text(FIVE_CHUNK_TEXT, 6), max_chunks=2
    )

    assert [(f.text, f.start_index) for f in result.findings] == [("Bbbb", 6)]


def test_parallel_run_matches_sequential_order() -> None:
    chunks = chunk_text(FIVE_CHUNK_TEXT, 6)

    sequential = AnalysisOrchestrator(FakeOracle(_first_word_is_wrong)).analyze(
        FIVE_CHUNK_TEXT, CheckKind.grammar, chunks, max_chunks=5
    )
    parallel = AnalysisOrchestrator(FakeOracle(_first_word_is_wrong), concurrency=4).analyze(
        FIVE_CHUNK_TEXT, CheckKind.grammar, chunks, max_chunks=5
    )

    assert parallel == sequential
    assert [f.start_index for f in parallel.findings] == [0, 6, 12, 18, 24]


def test_ai_detection_scores_coverage_of_sampled_chunks() -> None:
    text = "Human words here. Generated prose follows."
    chunks = chunk_text(text, 30)
    assert len(chunks) == 2

    def reply(kind: CheckKind, chunk: str) -> str:
        score = 90 if chunk.startswith("Generated") else 10
        return json.dumps({"score": score, "reason": "uniform polish"})

    result = AnalysisOrchestrator(FakeOracle(reply)).analyze(text, CheckKind.ai_detection, chunks, max_chunks=8)

    (finding,) = result.findings
    assert finding.text == "Generated prose follows."
    assert result.overall_score == 45.0
    assert result.verdict == "mixed"
    assert result.corrected_text is None
    assert "uniform polish" in result.summary


def test_repeated_typo_gets_one_finding_per_occurrence() -> None:
    text = "teh cat sat on teh mat"
    typo = {"text": "teh", "type": "spelling", "suggestion": "the"}
    oracle = FakeOracle(lambda kind, chunk: json.dumps({"mistakes": [typo, typo]}))

    result = AnalysisOrchestrator(oracle).analyze(text, CheckKind.grammar, chunk_text(text, 2500), max_chunks=5)

    assert [(f.start_index, f.end_index) for f in result.findings] == [(0, 3), (15, 18)]
    assert result.counts == {"spelling": 2}
    assert apply_corrections(text, result.findings) == "the cat sat on the mat"
