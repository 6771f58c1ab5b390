"""Configuration loading for slopscan."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from slopscan.rules.base import Severity

CONFIG_FILENAMES = (".slopscan.toml", "slopscan.toml")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_KEYS = ("slopscan",)

OUTPUT_FORMATS = {"terminal", "json"}
SEVERITY_CHOICES = {item.value for item in Severity}


@dataclass(slots=True)
class AppConfig:
    """Runtime configuration values resolved from project files."""

    format: str = "terminal"
    severity_threshold: str = "info"
    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    rule_enable: list[str] | None = None
    rule_disable: list[str] = field(default_factory=list)
    source: str | None = None

    @property
    def threshold(self) -> Severity:
        return Severity(self.severity_threshold)

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "severity_threshold": self.severity_threshold,
            "include": list(self.include),
            "exclude": list(self.exclude),
            "rules": {
                "enable": list(self.rule_enable) if self.rule_enable is not None else None,
                "disable": list(self.rule_disable),
            },
            "source": self.source,
        }


def load_app_config(root: Path, config_path: Path | None = None) -> AppConfig:
    """Load config from explicit path or project-local files with precedence."""
    root = root.resolve()
    if config_path is not None:
        resolved = config_path if config_path.is_absolute() else (root / config_path)
        if not resolved.exists():
            raise ValueError(f"Config file does not exist: {resolved}")
        mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
        return _from_mapping(mapping, source=str(resolved))

    for filename in CONFIG_FILENAMES:
        resolved = root / filename
        if resolved.exists():
            mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
            return _from_mapping(mapping, source=str(resolved))

    pyproject_path = root / PYPROJECT_FILENAME
    if pyproject_path.exists():
        mapping = _extract_config_mapping(_load_toml(pyproject_path), source_path=pyproject_path)
        if mapping:
            return _from_mapping(mapping, source=str(pyproject_path))

    return AppConfig()


def default_config_template() -> str:
    """Return a starter config template."""
    return "\n".join(
        [
            'format = "terminal"',
            'severity_threshold = "info"',
            'include = ["src/**"]',
            'exclude = ["vendor/*", "*/vendor/*", "*.min.js"]',
            "",
            "[rules]",
            "enable = [",
            '  "slop-001",',
            '  "slop-002",',
            '  "slop-003",',
            '  "slop-004",',
            '  "slop-005",',
            "]",
            "disable = []",
            "",
        ]
    )


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as file_obj:
            loaded = tomllib.load(file_obj)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        return {}
    return loaded


def _extract_config_mapping(loaded: dict[str, Any], *, source_path: Path) -> dict[str, Any]:
    if source_path.name == PYPROJECT_FILENAME:
        section = _find_pyproject_tool_section(loaded)
        return section if section is not None else {}

    tool_section = _find_pyproject_tool_section(loaded)
    if tool_section is not None:
        return tool_section
    return loaded


def _find_pyproject_tool_section(loaded: dict[str, Any]) -> dict[str, Any] | None:
    tool = loaded.get("tool")
    if not isinstance(tool, dict):
        return None
    for key in PYPROJECT_TOOL_KEYS:
        section = tool.get(key)
        if isinstance(section, dict):
            return section
    return None


def _from_mapping(mapping: dict[str, Any], *, source: str) -> AppConfig:
    rules_mapping = _as_table(mapping.get("rules"), "rules")

    return AppConfig(
        format=_as_choice(mapping.get("format", "terminal"), OUTPUT_FORMATS, "format"),
        severity_threshold=_as_choice(
            mapping.get("severity_threshold", "info"),
            SEVERITY_CHOICES,
            "severity_threshold",
        ),
        include=_as_str_list(mapping.get("include"), "include"),
        exclude=_as_str_list(mapping.get("exclude"), "exclude"),
        rule_enable=_as_str_list_or_none(rules_mapping.get("enable"), "rules.enable"),
        rule_disable=_as_str_list(rules_mapping.get("disable"), "rules.disable"),
        source=source,
    )


def _as_table(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be a table/object")
    return value


def _as_str_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list of strings")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{field_name} must be a list of strings")
        items.append(item)
    return items


def _as_str_list_or_none(value: Any, field_name: str) -> list[str] | None:
    if value is None:
        return None
    return _as_str_list(value, field_name)


def _as_choice(raw: Any, allowed: set[str], field_name: str) -> str:
    value = str(raw).lower()
    if value not in allowed:
        choices = ", ".join(sorted(allowed))
        raise ValueError(f"{field_name} must be one of: {choices}")
    return value
