"""Sentence fingerprints for comparing a document against earlier uploads.

A fingerprint keeps an MD5 of the whole normalised text plus one per sentence longer
than ``MIN_SENTENCE_LENGTH``. Two documents match on identical whole-text hashes (100%)
or on the share of the current document's sentences found in the other one.
"""

from __future__ import annotations

import hashlib
import math
import re
from dataclasses import dataclass, replace
from typing import Protocol

from docscan.analysis import scoring
from docscan.analysis.models import AnalysisResult, InternalMatch
from docscan.domain.enums import CheckKind

MIN_SENTENCE_LENGTH = 20
MIN_MATCH_PERCENTAGE = 10
MAX_MATCHES = 5
INTERNAL_MATCH_ALERT = "ALERT: This content matches previously submitted documents in our database."

_SENTENCE_BREAK = re.compile(r"[.!?]+")
_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class Fingerprint:
    text_hash: str
    sentence_hashes: list[str]
    word_count: int


class FingerprintRecord(Protocol):
    document_id: int
    fingerprint: Fingerprint
    created_at: str


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", _PUNCTUATION.sub("", text.lower())).strip()


def hash_text(text: str) -> str:
    return hashlib.md5(text.lower().strip().encode("utf-8")).hexdigest()


def split_sentences(text: str) -> list[tuple[str, str]]:
    """Return (as written, normalised) pairs for every sentence long enough to compare."""
    out: list[tuple[str, str]] = []
    for piece in _SENTENCE_BREAK.split(text):
        sentence = piece.strip()
        if len(sentence) > MIN_SENTENCE_LENGTH:
            out.append((sentence, normalize_text(sentence)))
    return out


def make_fingerprint(text: str) -> Fingerprint:
    normalized = normalize_text(text)
    return Fingerprint(
        text_hash=hash_text(normalized),
        sentence_hashes=[hash_text(n) for _, n in split_sentences(text)],
        word_count=len(normalized.split()),
    )


def find_matches(text: str, others: list[FingerprintRecord]) -> list[InternalMatch]:
    """Best matches of ``text`` among ``others``, highest percentage first."""
    if not normalize_text(text):
        return []

    sentences = split_sentences(text)
    hashes = [hash_text(n) for _, n in sentences]
    text_hash = hash_text(normalize_text(text))

    matches: list[InternalMatch] = []
    for other in others:
        if other.fingerprint.text_hash == text_hash:
            matches.append(
                InternalMatch(
                    document_id=other.document_id,
                    match_percentage=100,
                    match_count=len(sentences),
                    matched_sentences=[original for original, _ in sentences],
                    uploaded_at=other.created_at,
                )
            )
            continue

        known = set(other.fingerprint.sentence_hashes)
        matched = [original for (original, _), h in zip(sentences, hashes) if h in known]
        if not matched:
            continue
        percentage = math.floor(len(matched) / max(len(hashes), 1) * 100 + 0.5)
        if percentage >= MIN_MATCH_PERCENTAGE:
            matches.append(
                InternalMatch(
                    document_id=other.document_id,
                    match_percentage=percentage,
                    match_count=len(matched),
                    matched_sentences=matched,
                    uploaded_at=other.created_at,
                )
            )

    matches.sort(key=lambda m: m.match_percentage, reverse=True)
    return matches[:MAX_MATCHES]


def apply_internal_matches(result: AnalysisResult, matches: list[InternalMatch]) -> AnalysisResult:
    """Raise a plagiarism result to its highest internal match and flag it in the summary."""
    if not matches:
        return result

    highest = float(matches[0].match_percentage)
    overall = max(result.overall_score, highest)
    return replace(
        result,
        overall_score=overall,
        verdict=scoring.BANDS[CheckKind.plagiarism].verdict(overall),
        summary=f"{result.summary} {INTERNAL_MATCH_ALERT}",
        internal_matches=list(matches),
    )
