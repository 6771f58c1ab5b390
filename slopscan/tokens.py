"""Identifier splitting, stemming and token-overlap helpers."""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache

from nltk.stem.snowball import SnowballStemmer

from slopscan.syntax import comment_lines

STOP_WORDS = frozenset(
    {"the", "a", "an", "this", "that", "to", "of", "in", "for", "is", "it", "be", "as", "with"}
)

_TOKEN_SEPARATORS = frozenset({"'", '"', "`"})
_STEMMER = SnowballStemmer("english")


def split_identifier(name: str) -> list[str]:
    """Split a camelCase, PascalCase or snake_case identifier into lowercase words.

    ``setUserName`` -> ``["set", "user", "name"]``,
    ``HTMLParser`` -> ``["html", "parser"]``,
    ``MAX_SIZE`` -> ``["max", "size"]``.
    """
    words: list[str] = []
    for segment in _split_segments(name):
        current = ""
        for index, char in enumerate(segment):
            if char.isupper() and current:
                prev_lower = segment[index - 1].islower()
                next_lower = index + 1 < len(segment) and segment[index + 1].islower()
                if prev_lower or (next_lower and len(current) > 1):
                    words.append(current.lower())
                    current = ""
            current += char
        if current:
            words.append(current.lower())
    return words


@lru_cache(maxsize=4096)
def stem(word: str) -> str:
    """Return the Snowball (Porter2) English stem of ``word``."""
    return _STEMMER.stem(word.lower())


def extract_comment_tokens(comment_text: str) -> list[str]:
    """Return stemmed, stop-word-free tokens of a comment in reading order."""
    tokens: list[str] = []
    for line in comment_lines(comment_text):
        for raw in _split_words(line):
            word = _trim_non_alnum(raw)
            if len(word) <= 1:
                continue
            lowered = word.lower()
            if lowered in STOP_WORDS:
                continue
            tokens.append(stem(lowered))
    return tokens


def extract_code_tokens(identifiers: Iterable[str]) -> set[str]:
    """Return the set of stemmed words found in a collection of identifiers."""
    tokens: set[str] = set()
    for identifier in identifiers:
        for word in split_identifier(identifier):
            tokens.add(stem(word))
    return tokens


def overlap_ratio(comment_tokens: list[str], code_tokens: set[str]) -> float:
    """Fraction of comment tokens that also appear among the code tokens."""
    if not comment_tokens:
        return 0.0
    matching = sum(1 for token in comment_tokens if token in code_tokens)
    return matching / len(comment_tokens)


def _split_segments(name: str) -> list[str]:
    segments: list[str] = []
    current = ""
    for char in name:
        if char.isalnum():
            current += char
            continue
        if current:
            segments.append(current)
        current = ""
    if current:
        segments.append(current)
    return segments


def _split_words(line: str) -> list[str]:
    words: list[str] = []
    current = ""
    for char in line:
        if char.isspace() or char in _TOKEN_SEPARATORS:
            if current:
                words.append(current)
            current = ""
            continue
        current += char
    if current:
        words.append(current)
    return words


def _trim_non_alnum(word: str) -> str:
    start = 0
    end = len(word)
    while start < end and not word[start].isalnum():
        start += 1
    while end > start and not word[end - 1].isalnum():
        end -= 1
    return word[start:end]
