import json

from docscan.analysis.checks import AiDetectionCheck, GrammarCheck, PlagiarismCheck
from docscan.analysis.models import Chunk

CHUNK = Chunk(text="Furthermore, it is important to note that teh results vary. ", document_offset=0)


def test_grammar_fills_defaults_and_keeps_corrected_text() -> None:
    reply = json.dumps(
        {
            "mistakes": [
                {"text": "teh", "type": "Spelling", "suggestion": "the", "explanation": "Typo"},
                {"text": "results vary"},
            ],
            "correctedText": "Furthermore, it is important to note that the results vary. ",
        }
    )

    outcome = GrammarCheck().interpret(CHUNK, reply)

    first, second = outcome.candidates
    assert (first.category, first.suggestion, first.explanation) == ("spelling", "the", "Typo")
    assert (second.category, second.suggestion, second.explanation) == ("grammar", "results vary", "Error detected")
    assert outcome.corrected_text.endswith("the results vary. ")


def test_grammar_empty_suggestion_keeps_excerpt() -> None:
    reply = json.dumps({"mistakes": [{"text": "teh", "type": "spelling", "suggestion": ""}]})

    (candidate,) = GrammarCheck().interpret(CHUNK, reply).candidates

    assert candidate.suggestion == "teh"


def test_plagiarism_keeps_only_copied_sentences_above_floor() -> None:
    reply = json.dumps(
        {
            "sentences": [
                {"text": "it is important to note", "score": 82, "copied": True, "source": "Wikipedia"},
                {"text": "teh results vary", "score": 45, "copied": True},
                {"text": "Furthermore", "score": 55, "copied": False},
                {"text": "results", "score": 38, "copied": True},
                {"text": "note", "score": 30, "copied": False},
            ]
        }
    )

    candidates = PlagiarismCheck().interpret(CHUNK, reply).candidates

    assert [(c.excerpt, c.category) for c in candidates] == [
        ("it is important to note", "high"),
        ("teh results vary", "low"),
        ("Furthermore", "medium"),
    ]
    assert candidates[0].suggestion == "Wikipedia"
    assert candidates[1].suggestion == "Educational/Online Source"


def test_ai_chunk_score_flags_the_whole_chunk() -> None:
    candidates = AiDetectionCheck().interpret(CHUNK, '{"score": 85, "reason": "formulaic transitions"}').candidates

    assert len(candidates) == 1
    assert candidates[0].excerpt == CHUNK.text.strip()
    assert candidates[0].category == "ai"
    assert candidates[0].explanation == "formulaic transitions"


def test_ai_low_chunk_score_flags_nothing() -> None:
    assert AiDetectionCheck().interpret(CHUNK, '{"score": 35, "reason": "casual"}').candidates == []


def test_ai_sections_take_precedence_over_chunk_score() -> None:
    reply = json.dumps(
        {
            "score": 90,
            "sections": [
                {"text": "Furthermore", "score": 65, "reason": "transition"},
                {"text": "teh results", "score": 10},
            ],
        }
    )

    candidates = AiDetectionCheck().interpret(CHUNK, reply).candidates

    assert [(c.excerpt, c.category) for c in candidates] == [("Furthermore", "likely_ai")]


def test_generic_findings_shape_is_accepted_by_every_kind() -> None:
    reply = json.dumps({"findings": [{"excerpt": "teh", "category": "spelling", "confidence": 140}]})

    for check in (GrammarCheck(), PlagiarismCheck(), AiDetectionCheck()):
        candidates = check.interpret(CHUNK, reply).candidates
        assert [(c.excerpt, c.category, c.confidence) for c in candidates] == [("teh", "spelling", 100.0)]


def test_unreadable_reply_is_zero_findings() -> None:
    outcome = GrammarCheck().interpret(CHUNK, "The service is overloaded, please retry.")

    assert outcome.candidates == []
    assert outcome.corrected_text is None
