"""
Topic Matcher - Picks the chapter that best fits a student's topic.

Scoring is plain token overlap on normalized strings:
- identical normalized strings score 1.0
- otherwise, the share of topic words (longer than 2 characters) found
  inside the chapter title

When nothing scores above zero the first chapter is returned anyway, so a
topic from outside the book still gets a (possibly unrelated) chapter.
"""

import re
from dataclasses import dataclass

from ncert_study.catalog.models import ChapterRecord

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")

MIN_WORD_LENGTH = 3


@dataclass(frozen=True)
class MatchResult:
    """A chapter and how well it matched, in [0, 1]."""

    chapter: ChapterRecord
    score: float


def normalize(value: str) -> str:
    """
    Lowercase, drop punctuation, collapse whitespace.

    Example:
        normalize("  Acids, Bases & Salts! ")  # 'acids bases salts'
    """
    value = _NON_ALNUM.sub(" ", value.lower())
    return _WHITESPACE.sub(" ", value).strip()


def match_score(chapter_title: str, topic: str) -> float:
    chapter = normalize(chapter_title)
    query = normalize(topic)
    if not chapter or not query:
        return 0.0

    if chapter == query:
        return 1.0

    words = [word for word in query.split(" ") if len(word) >= MIN_WORD_LENGTH]
    if not words:
        return 0.0

    hits = sum(1 for word in words if word in chapter)
    return hits / len(words)


def best_match(chapters: list[ChapterRecord], topic: str) -> MatchResult | None:
    """
    Score every chapter and return the best one.

    Ties keep the earlier chapter. Returns None only for an empty list.
    """
    if not chapters:
        return None

    best = MatchResult(chapter=chapters[0], score=0.0)
    for chapter in chapters:
        score = match_score(chapter.title, topic)
        if score > best.score:
            best = MatchResult(chapter=chapter, score=score)
    return best


def best_chapter(chapters: list[ChapterRecord], topic: str) -> ChapterRecord | None:
    match = best_match(chapters, topic)
    return match.chapter if match else None
