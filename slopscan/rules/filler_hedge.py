"""Filler and hedge-word rule."""

from __future__ import annotations

import string

from tree_sitter import Tree

from slopscan.rules.base import Finding, Severity, finding_at
from slopscan.syntax import comment_lines, decode_source, is_doc_comment, iter_comments, node_text

PHRASE_START_PATTERNS = (
    "basically,",
    "simply put",
    "just ",
    "obviously,",
    "note:",
    "important:",
    "essentially,",
    "please note",
    "it's worth noting",
    "it should be noted",
    "worth mentioning",
    "keep in mind",
)

FILLER_WORDS = frozenset(
    {
        "basically",
        "simply",
        "just",
        "obviously",
        "essentially",
        "actually",
        "really",
        "very",
        "quite",
        "perhaps",
        "maybe",
        "probably",
    }
)

FILLER_DENSITY_THRESHOLD = 3

REFERENCE_PREFIXES = ("rfc", "http", "#", "issue", "see ")


class FillerHedgeRule:
    """Flags hedge openers and lines dense with filler words."""

    rule_id = "slop-003"
    name = "Filler/Hedge Words"
    description = "Detects filler and hedge words that weaken comment clarity"
    severity = Severity.WARN

    def check(self, source: bytes, tree: Tree, file_path: str) -> list[Finding]:
        if decode_source(source, file_path) is None:
            return []

        findings: list[Finding] = []
        for node in iter_comments(tree):
            text = node_text(node, source)
            if is_doc_comment(text):
                continue
            if not any(_is_filler_line(line) for line in comment_lines(text)):
                continue
            findings.append(
                finding_at(
                    node,
                    file_path=file_path,
                    message="comment contains filler/hedge words",
                    suggestion="Remove filler words and state the point directly.",
                )
            )
        return findings


def _is_filler_line(line: str) -> bool:
    lowered = line.lower()

    # "Note: see RFC 7231" style pointers carry information.
    if lowered.startswith("note:") and _is_reference(line[5:].strip()):
        return False

    for pattern in PHRASE_START_PATTERNS:
        if not lowered.startswith(pattern):
            continue
        if pattern == "just " and _is_meaningful_just(lowered):
            continue
        return True

    return filler_word_count(lowered) >= FILLER_DENSITY_THRESHOLD


def filler_word_count(line: str) -> int:
    count = 0
    for word in line.lower().split():
        if word.strip(string.punctuation) in FILLER_WORDS:
            count += 1
    return count


def _is_reference(text: str) -> bool:
    return text.lower().startswith(REFERENCE_PREFIXES)


def _is_meaningful_just(lowered: str) -> bool:
    return lowered.startswith("just-in-time") or lowered.startswith("just as ")
