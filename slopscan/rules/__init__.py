"""Rules package."""

from dataclasses import dataclass

from slopscan.rules.base import Finding, Rule, Severity
from slopscan.rules.commented_out_code import CommentedOutCodeRule
from slopscan.rules.filler_hedge import FillerHedgeRule
from slopscan.rules.reasoning_artifact import ReasoningArtifactRule
from slopscan.rules.redundant_comment import RedundantCommentRule
from slopscan.rules.self_narrating import SelfNarratingRule

__all__ = [
    "Finding",
    "Rule",
    "RuleInfo",
    "Severity",
    "all_rules",
    "build_rules",
    "list_rule_info",
]

RULE_CLASSES: tuple[type[Rule], ...] = (
    RedundantCommentRule,
    ReasoningArtifactRule,
    FillerHedgeRule,
    CommentedOutCodeRule,
    SelfNarratingRule,
)


@dataclass(frozen=True, slots=True)
class RuleInfo:
    """Rule metadata for listing and selection."""

    rule_id: str
    name: str
    description: str
    severity: Severity


def all_rules() -> list[Rule]:
    """Return one instance of every rule in registration order."""
    return [rule_cls() for rule_cls in RULE_CLASSES]


def build_rules(
    *,
    enabled_rule_ids: list[str] | None = None,
    disabled_rule_ids: list[str] | None = None,
) -> list[Rule]:
    """Build rule instances applying enable/disable filters.

    ``enabled_rule_ids=None`` selects every rule; registration order is kept
    either way.
    """
    rules = all_rules()
    registry = {rule.rule_id: rule for rule in rules}
    requested_ids = set(enabled_rule_ids or []) | set(disabled_rule_ids or [])

    unknown = [rule_id for rule_id in requested_ids if rule_id not in registry]
    if unknown:
        joined = ", ".join(sorted(unknown))
        raise ValueError(f"Unknown rule ids: {joined}")

    disabled_set = set(disabled_rule_ids or [])
    enabled_set = set(enabled_rule_ids) if enabled_rule_ids is not None else set(registry)
    return [
        rule for rule in rules if rule.rule_id in enabled_set and rule.rule_id not in disabled_set
    ]


def list_rule_info() -> list[RuleInfo]:
    """Return metadata for every known rule."""
    return [
        RuleInfo(
            rule_id=rule.rule_id,
            name=rule.name,
            description=rule.description,
            severity=rule.severity,
        )
        for rule in all_rules()
    ]
