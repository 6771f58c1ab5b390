"""Rule-level tests against fixtures and inline snippets."""

from __future__ import annotations

import pytest

from slopscan.rules import all_rules, build_rules, list_rule_info
from slopscan.rules.base import Finding, Rule, Severity
from slopscan.rules.commented_out_code import (
    CommentedOutCodeRule,
    looks_like_code,
    looks_like_statement,
)
from slopscan.rules.filler_hedge import FillerHedgeRule, filler_word_count
from slopscan.rules.reasoning_artifact import ReasoningArtifactRule
from slopscan.rules.redundant_comment import RedundantCommentRule, find_adjacent_code
from slopscan.rules.self_narrating import SelfNarratingRule
from slopscan.syntax import iter_comments, node_text
from tests.helpers_parse import expected_lines, parse_fixture, parse_source


def _check(rule: Rule, code: str, extension: str = "js") -> list[Finding]:
    source, tree = parse_source(code, extension)
    return rule.check(source, tree, f"snippet.{extension}")


def _fixture_lines(rule: Rule, relative: str) -> list[int]:
    source, tree, path = parse_fixture(relative)
    return [finding.line for finding in rule.check(source, tree, path)]


def test_registry_lists_five_rules_in_fixed_order() -> None:
    assert [rule.rule_id for rule in all_rules()] == [
        "slop-001",
        "slop-002",
        "slop-003",
        "slop-004",
        "slop-005",
    ]
    info = list_rule_info()
    assert len(info) == 5
    assert all(item.description for item in info)
    assert {item.severity for item in info} == {Severity.WARN}


def test_build_rules_applies_enable_and_disable() -> None:
    rules = build_rules(enabled_rule_ids=["slop-005", "slop-001"], disabled_rule_ids=["slop-005"])
    assert [rule.rule_id for rule in rules] == ["slop-001"]
    assert len(build_rules(disabled_rule_ids=["slop-004"])) == 4


def test_build_rules_rejects_unknown_ids() -> None:
    with pytest.raises(ValueError, match="Unknown rule ids: slop-999"):
        build_rules(enabled_rule_ids=["slop-999"])


@pytest.mark.parametrize(
    ("rule", "relative", "rule_id"),
    [
        (RedundantCommentRule(), "slop/redundant_comments.js", "slop-001"),
        (ReasoningArtifactRule(), "slop/reasoning_artifacts.js", "slop-002"),
        (FillerHedgeRule(), "slop/filler_hedge.js", "slop-003"),
        (CommentedOutCodeRule(), "slop/commented_out_code.js", "slop-004"),
        (SelfNarratingRule(), "slop/self_narrating.js", "slop-005"),
    ],
)
def test_rule_matches_expect_annotations(rule: Rule, relative: str, rule_id: str) -> None:
    expected = expected_lines(relative, rule_id)
    assert expected
    assert _fixture_lines(rule, relative) == expected


@pytest.mark.parametrize("rule", all_rules(), ids=lambda rule: rule.rule_id)
def test_rule_is_silent_on_clean_fixture(rule: Rule) -> None:
    assert _fixture_lines(rule, "clean/well_written.js") == []


@pytest.mark.parametrize("rule", all_rules(), ids=lambda rule: rule.rule_id)
def test_rule_skips_invalid_utf8(rule: Rule) -> None:
    source, tree = parse_source(b"// Set the user name \xff\n// return value;\nuser.setUserName(n);\n")
    assert rule.check(source, tree, "bad.js") == []


def test_findings_are_unstamped_and_positioned_at_comment() -> None:
    findings = _check(RedundantCommentRule(), "if (ok) {\n    // Set the user name\n    user.setUserName(name);\n}\n")
    assert len(findings) == 1
    finding = findings[0]
    assert finding.rule_id == ""
    assert (finding.line, finding.column) == (2, 5)
    assert finding.span == (14, 34)
    assert finding.file == "snippet.js"
    assert finding.suggestion


def test_redundant_comment_prefers_trailing_same_line_code() -> None:
    code = "resetRetryCounter(); // reset the retry counter\nloadUserProfile();\n"
    findings = _check(RedundantCommentRule(), code)
    assert [finding.line for finding in findings] == [1]


def test_redundant_comment_falls_through_to_next_sibling() -> None:
    code = "loadUserProfile();\n\n// reset the retry counter\nresetRetryCounter();\n"
    source, tree = parse_source(code)
    comment = next(iter_comments(tree))
    adjacent = find_adjacent_code(comment)
    assert adjacent is not None
    assert node_text(adjacent, source) == "resetRetryCounter();"


def test_redundant_comment_skips_comment_without_adjacent_code() -> None:
    assert _check(RedundantCommentRule(), "// reset the retry counter\n") == []


@pytest.mark.parametrize(
    "comment",
    [
        "// TODO: reset the retry counter",
        "// eslint-disable-next-line reset retry counter",
        "/** reset the retry counter */",
    ],
)
def test_redundant_comment_exemptions(comment: str) -> None:
    assert _check(RedundantCommentRule(), f"{comment}\nresetRetryCounter();\n") == []


def test_redundant_comment_uses_type_identifiers_in_typescript() -> None:
    code = "// user profile name\ninterface UserProfile { name: string }\n"
    findings = _check(RedundantCommentRule(), code, "ts")
    assert [finding.line for finding in findings] == [1]


def test_reasoning_artifact_checks_every_line_of_a_block() -> None:
    code = "/*\n * Parses the header.\n * Hmm, maybe the offset is wrong\n */\nparse();\n"
    findings = _check(ReasoningArtifactRule(), code)
    assert len(findings) == 1
    assert findings[0].line == 1


def test_reasoning_artifact_emits_one_finding_per_comment() -> None:
    code = "/*\n * Wait, this is off\n * Let me think again\n */\nrun();\n"
    assert len(_check(ReasoningArtifactRule(), code)) == 1


@pytest.mark.parametrize(
    ("comment", "flagged"),
    [
        ("// Just a wrapper around fetch", True),
        ("// Just-in-time compilation of templates", False),
        ("// Just as the header requires, pad to 4 bytes", False),
        ("// Note: the cache is shared", True),
        ("// Note: https://example.com/issue/12", False),
        ("// Note: #1234 tracks the fix", False),
        ("// It really is very quite slow", True),
        ("// It is really slow here", False),
    ],
)
def test_filler_hedge_cases(comment: str, flagged: bool) -> None:
    findings = _check(FillerHedgeRule(), f"{comment}\nrun();\n")
    assert bool(findings) is flagged


def test_filler_word_count_strips_punctuation() -> None:
    assert filler_word_count("Really, very... quite!") == 3


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("return user.profile;", True),
        ("if (user.isActive) {", True),
        ("}", True),
        ("total += item.price", True),
        ("const handler = () => done", True),
        ("items.map(format)", True),
        ("Users must wait for the response", False),
        ("@deprecated use loadUser", False),
        ("expect: slop-004", False),
        ("", False),
        ("returning early keeps this simple", False),
    ],
)
def test_looks_like_code(line: str, expected: bool) -> None:
    assert looks_like_code(line) is expected


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("return result;", True),
        ("x = compute();", True),
        ("break;", True),
        ("see the notes;", False),
        ("return result", False),
    ],
)
def test_looks_like_statement(content: str, expected: bool) -> None:
    assert looks_like_statement(content) is expected


def test_commented_out_block_comment_is_flagged() -> None:
    code = "/*\nconst total = sum(items);\nreturn total;\n*/\nrun();\n"
    findings = _check(CommentedOutCodeRule(), code)
    assert [(finding.line, finding.message) for finding in findings] == [
        (1, "block comment contains commented-out code")
    ]


def test_commented_out_group_span_covers_every_line() -> None:
    code = "// const a = load();\n// save(a);\nrun();\n"
    findings = _check(CommentedOutCodeRule(), code)
    assert len(findings) == 1
    assert findings[0].span == (0, len("// const a = load();\n// save(a);"))


def test_commented_out_group_breaks_on_line_gap() -> None:
    code = "// Loads the cache lazily\n\n// return cached;\nrun();\n"
    findings = _check(CommentedOutCodeRule(), code)
    assert [finding.line for finding in findings] == [3]


def test_commented_out_skips_license_block() -> None:
    code = "/*\n * SPDX-License-Identifier: MIT\n * const x = 1;\n * run(x);\n */\nrun();\n"
    assert _check(CommentedOutCodeRule(), code) == []


def test_self_narrating_skips_doc_blocks() -> None:
    code = "/**\n * This function formats dates\n */\nfunction f() {}\n"
    assert _check(SelfNarratingRule(), code) == []


def test_self_narrating_flags_block_comment_line() -> None:
    code = "/*\n * Setup\n * Here we open the socket\n */\nopen();\n"
    assert [finding.line for finding in _check(SelfNarratingRule(), code)] == [1]
