"""CLI entrypoint for slopscan."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from slopscan import __version__
from slopscan.analysis import scan_files
from slopscan.config import AppConfig, default_config_template, load_app_config
from slopscan.logs import configure_logging
from slopscan.output import (
    ReportError,
    build_rules_payload,
    render_json,
    render_rules_human,
    render_summary,
    render_terminal,
)
from slopscan.rules import build_rules, list_rule_info
from slopscan.rules.base import Rule, Severity
from slopscan.scanner import discover_files

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="slopscan",
    no_args_is_help=True,
    help="Static analysis for AI-generated comment patterns in JavaScript and TypeScript.",
)


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug diagnostics on stderr."),
    ] = False,
) -> None:
    """Root command callback."""
    _ = version
    configure_logging(verbose)


@app.command("scan")
def scan_command(
    path: Annotated[Path, typer.Argument(help="File or directory to scan.")],
    format: Annotated[
        str | None,
        typer.Option(help="Output format: terminal|json.", show_default="terminal"),
    ] = None,
    severity_threshold: Annotated[
        str | None,
        typer.Option(
            "--severity-threshold",
            help="Minimum severity to report: error|warn|info.",
            show_default="info",
        ),
    ] = None,
    include: Annotated[list[str] | None, typer.Option(help="Include glob pattern.")] = None,
    exclude: Annotated[list[str] | None, typer.Option(help="Exclude glob pattern.")] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Scan files for AI-generated comment patterns."""
    app_config = _load_config_or_raise(Path("."), config_file)
    output_format = _choice_or_default(
        value=format,
        default=app_config.format,
        allowed={"terminal", "json"},
        field_name="--format",
    )
    threshold = Severity(
        _choice_or_default(
            value=severity_threshold,
            default=app_config.severity_threshold,
            allowed={item.value for item in Severity},
            field_name="--severity-threshold",
        )
    )
    rules = _build_configured_rules_or_raise(app_config)

    files = discover_files(
        path,
        includes=include if include is not None else app_config.include,
        excludes=exclude if exclude is not None else app_config.exclude,
    )
    logger.debug("Scanning %d file(s) with %d rule(s)", len(files), len(rules))
    result = scan_files(files, rules=rules, threshold=threshold)

    try:
        if output_format == "json":
            typer.echo(render_json(result.findings))
        else:
            rendered = render_terminal(result.findings, result.sources)
            if rendered:
                typer.echo(rendered)
                typer.echo("")
            typer.echo(render_summary(result.findings, files_scanned=result.files_scanned))
    except ReportError as exc:
        logger.error("Error reporting findings: %s", exc)
        raise typer.Exit(code=2) from exc

    if result.findings:
        raise typer.Exit(code=1)


@app.command("rules")
def rules_command(
    format: Annotated[str, typer.Option(help="Output format: terminal|json.")] = "terminal",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """List available rules."""
    output_format = _choice_or_default(
        value=format,
        default="terminal",
        allowed={"terminal", "json"},
        field_name="--format",
    )
    app_config = _load_config_or_raise(Path("."), config_file)
    active_ids = {rule.rule_id for rule in _build_configured_rules_or_raise(app_config)}
    rule_info = list_rule_info()

    if output_format == "json":
        payload = build_rules_payload(rule_info, active_ids, config_source=app_config.source)
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    typer.echo(render_rules_human(rule_info, active_ids))


@app.command("config")
def config_command(
    format: Annotated[str, typer.Option(help="Output format: terminal|json.")] = "terminal",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Show resolved configuration."""
    output_format = _choice_or_default(
        value=format,
        default="terminal",
        allowed={"terminal", "json"},
        field_name="--format",
    )
    app_config = _load_config_or_raise(Path("."), config_file)
    active_rules = _build_configured_rules_or_raise(app_config)
    payload = app_config.to_dict()
    payload["active_rule_ids"] = [rule.rule_id for rule in active_rules]

    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [
        "Resolved configuration:",
        f"- source: {payload['source'] or 'defaults'}",
        f"- format: {payload['format']}",
        f"- severity_threshold: {payload['severity_threshold']}",
        f"- include: {payload['include']}",
        f"- exclude: {payload['exclude']}",
        f"- rules.enable: {payload['rules']['enable']}",
        f"- rules.disable: {payload['rules']['disable']}",
        f"- active_rule_ids: {payload['active_rule_ids']}",
    ]
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[Path, typer.Option(help="Output path for starter config TOML.")] = Path(
        ".slopscan.toml"
    ),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite if file already exists."),
    ] = False,
) -> None:
    """Create a starter config file."""
    out_path = out.resolve()
    if out_path.exists() and not force:
        raise typer.BadParameter(
            f"Refusing to overwrite existing file: {out_path}. Use --force to overwrite."
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {out_path}")


def main() -> None:
    """Console script entrypoint."""
    app()


def _load_config_or_raise(root: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(root, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _build_configured_rules_or_raise(app_config: AppConfig) -> list[Rule]:
    try:
        return build_rules(
            enabled_rule_ids=app_config.rule_enable,
            disabled_rule_ids=app_config.rule_disable,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config.rules") from exc


def _choice_or_default(
    *,
    value: str | None,
    default: str,
    allowed: set[str],
    field_name: str,
) -> str:
    resolved = (value or default).lower()
    if resolved not in allowed:
        choices = ", ".join(sorted(allowed))
        raise typer.BadParameter(f"{field_name} must be one of: {choices}", param_hint=field_name)
    return resolved
