"""Content statistics: word and paragraph counts, readability, keyword density."""

import re
from collections import Counter
from typing import Dict, List

from bs4 import BeautifulSoup

from app.models.signals import ContentLength, ContentStats
from app.services.sanitizer import count_paragraphs, visible_text

# Shortest token counted as a word
_MIN_WORD_CHARS = 3

SHORT_CONTENT_WORDS = 300
LONG_CONTENT_WORDS = 1000

KEYWORD_LIMIT = 10

STOPWORDS = frozenset(
    {
        "the", "and", "for", "are", "but", "not", "you", "all", "can", "has",
        "had", "was", "been", "have", "will", "from", "this", "that", "with",
        "they", "your", "our", "their", "there", "what", "when", "which", "who",
        "how", "its", "into", "than", "then", "them", "these", "those", "were",
        "would", "could", "should", "about", "also", "more", "most", "other",
        "some", "such", "only", "any", "each", "out", "over", "very", "just",
        "may", "use", "his", "her", "she", "him", "one", "get", "off", "via",
    }
)

# Letters and digits in any script; punctuation, symbols and "_" separate tokens
_TOKEN_RE = re.compile(r"[^\W_]+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_VOWEL_GROUP_RE = re.compile(r"[aeiouy]+")


def tokenize(text: str) -> List[str]:
    """Lower-cased word tokens of *text*, the unit for word count and keyword density."""
    return [t for t in _TOKEN_RE.findall(text.lower()) if len(t) >= _MIN_WORD_CHARS]


def _count_syllables(word: str) -> int:
    """Approximate syllables as vowel groups, dropping a silent trailing 'e'."""
    word = word.lower()
    groups = len(_VOWEL_GROUP_RE.findall(word))
    if word.endswith("e") and not word.endswith(("le", "ee")) and groups > 1:
        groups -= 1
    return max(1, groups)


def readability(text: str, words: List[str]) -> float:
    """Flesch Reading Ease of *text*, clamped to [0, 100]. Zero when there are no words."""
    if not words:
        return 0.0
    sentences = len([s for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]) or 1
    syllables = sum(_count_syllables(w) for w in words)
    score = 206.835 - 1.015 * (len(words) / sentences) - 84.6 * (syllables / len(words))
    return round(max(0.0, min(100.0, score)), 1)


def classify_length(word_count: int) -> ContentLength:
    if word_count < SHORT_CONTENT_WORDS:
        return "short"
    if word_count < LONG_CONTENT_WORDS:
        return "medium"
    return "long"


def keyword_density(words: List[str], limit: int = KEYWORD_LIMIT) -> Dict[str, float]:
    """Top *limit* non-stopword tokens of *words*, each as a percentage of ``len(words)``.

    *words* is the output of :func:`tokenize`. Ties keep first-occurrence
    order, so the mapping is stable across runs.
    """
    if not words:
        return {}
    keywords = [w for w in words if w not in STOPWORDS]
    counts = Counter(keywords)
    first_seen = {}
    for index, keyword in enumerate(keywords):
        first_seen.setdefault(keyword, index)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], first_seen[item[0]]))
    total = len(words)
    return {keyword: round(count / total * 100, 2) for keyword, count in ranked[:limit]}


def analyze_content(soup: BeautifulSoup) -> ContentStats:
    """Compute :class:`ContentStats` from a visible-only tree (see ``sanitizer.visible_tree``)."""
    text = visible_text(soup)
    words = tokenize(text)
    word_count = len(words)

    return ContentStats(
        word_count=word_count,
        paragraph_count=count_paragraphs(soup),
        readability_score=readability(text, words),
        content_length=classify_length(word_count),
        keyword_density=keyword_density(words),
    )
