"""Command line interface for spdxtree."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Any, NoReturn

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from spdxtree.collection import (
    CollectionError,
    CollectionResult,
    ExtensionClassifier,
    FileCollector,
    extension_of,
)
from spdxtree.config import (
    LIST_SETTINGS,
    SETTING_TYPES,
    ConfigError,
    ConfigManager,
    SpdxTreeConfig,
    expand_dotted,
    flatten_for_env,
    merge_settings,
    parse_setting_value,
    resolve_with_precedence,
)
from spdxtree.log import configure_logging

console = Console()


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> NoReturn:
    """Emit a standardized error and terminate the command.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output.
        click.ClickException: For non-JSON flows.
    """
    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)
    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Print ``message`` unless quiet or summary-only mode suppresses it."""
    if quiet and mode != "error":
        return
    if summary_only and mode not in {"summary", "warning", "error"}:
        return
    console.print(message)


def _load_config(
    ctx: click.Context, cli_overrides: dict[str, Any] | None, *, json_output: bool
) -> SpdxTreeConfig:
    manager = ConfigManager()
    try:
        config = manager.load(cli_overrides=cli_overrides)
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
    configure_logging(config.logging, level=ctx.obj.get("log_level") if ctx.obj else None)
    return config


def _build_classifier(config: SpdxTreeConfig) -> ExtensionClassifier:
    return ExtensionClassifier.from_settings(
        config.classification.table_path, config.classification.extensions
    )


def _run_collection(
    ctx: click.Context,
    path: str,
    *,
    excludes: tuple[str, ...],
    excluded_names: tuple[str, ...],
    best_effort: bool,
    no_follow_symlinks: bool,
    classification_table: str | None,
    json_output: bool,
) -> CollectionResult:
    overrides: dict[str, Any] = {}
    if best_effort:
        overrides["collection.fail_fast"] = False
    if no_follow_symlinks:
        overrides["collection.follow_symlinks"] = False
    if classification_table:
        overrides["classification.table_path"] = classification_table
    config = _load_config(ctx, overrides, json_output=json_output)

    if excludes:
        patterns = [*config.collection.exclude_patterns, *excludes]
        try:
            config = resolve_with_precedence(
                defaults=config, cli_overrides={"collection.exclude_patterns": patterns}
            )
        except ConfigError as exc:
            _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)

    names = list(excluded_names)
    if config.collection.spdx_file_name:
        names.append(config.collection.spdx_file_name)

    try:
        collector = FileCollector.from_options(
            config.collection,
            config.default_file_information,
            classifier=_build_classifier(config),
        )
        collector.collect(Path(path))
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
    except CollectionError as exc:
        _handle_cli_error(str(exc), code="collection_failed", json_output=json_output, original=exc)
    return collector.result(names)


def _result_payload(root: str, result: CollectionResult) -> dict[str, Any]:
    code = result.verification_code
    return {
        "root": root,
        "files": [
            {
                "path": identity.path,
                "category": identity.category.value,
                "checksum": identity.checksum,
            }
            for identity in sorted(result.files.values(), key=lambda item: item.path)
        ],
        "verification_code": {
            "value": code.value,
            "excluded_paths": list(code.excluded_paths),
        },
        "license_references": result.license_references,
        "errors": result.errors,
    }


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="spdxtree")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override the configured logging level.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """spdxtree builds SPDX file manifests and package verification codes."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level


@cli.command()
@click.argument("path", type=click.Path(exists=True, path_type=str))
@click.option(
    "-e",
    "--exclude",
    "excludes",
    multiple=True,
    help="Regular expression; files or directories whose name matches are skipped.",
)
@click.option(
    "--exclude-from-code",
    "excluded_names",
    multiple=True,
    help="Collected path to leave out of the verification code (e.g. the SPDX file).",
)
@click.option("--best-effort", is_flag=True, help="Skip unreadable files instead of aborting.")
@click.option("--no-follow-symlinks", is_flag=True, help="Ignore symbolic links.")
@click.option(
    "--classification-table",
    type=click.Path(exists=True, dir_okay=False, path_type=str),
    help="YAML table mapping categories to extensions.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the manifest as JSON.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def collect(
    ctx: click.Context,
    path: str,
    excludes: tuple[str, ...],
    excluded_names: tuple[str, ...],
    best_effort: bool,
    no_follow_symlinks: bool,
    classification_table: str | None,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Collect file identities under PATH and print the verification code."""
    result = _run_collection(
        ctx,
        path,
        excludes=excludes,
        excluded_names=excluded_names,
        best_effort=best_effort,
        no_follow_symlinks=no_follow_symlinks,
        classification_table=classification_table,
        json_output=json_output,
    )

    if json_output:
        console.print_json(data=_result_payload(path, result))
        return

    table = Table(title=f"Files under {path}")
    table.add_column("Path", overflow="fold")
    table.add_column("Category")
    table.add_column("SHA1")
    for identity in sorted(result.files.values(), key=lambda item: item.path):
        table.add_row(identity.path, identity.category.value, identity.checksum)
    _emit_message(table, mode="detail", quiet=quiet, summary_only=summary_mode)

    for error in result.errors:
        _emit_message(
            f"[yellow]Skipped: {error}[/yellow]",
            mode="warning",
            quiet=quiet,
            summary_only=summary_mode,
        )

    code = result.verification_code
    licenses = ", ".join(result.license_references) or "none"
    excluded = ", ".join(code.excluded_paths) or "none"
    _emit_message(
        f"[green]collect summary for {path}: files={len(result.files)}, "
        f"licenses={licenses}, excluded={excluded}, verification_code={code.value}.[/green]",
        mode="summary",
        quiet=quiet,
        summary_only=summary_mode,
    )


@cli.command()
@click.argument("path", type=click.Path(exists=True, path_type=str))
@click.argument("expected")
@click.option("-e", "--exclude", "excludes", multiple=True, help="Name pattern to skip.")
@click.option(
    "--exclude-from-code",
    "excluded_names",
    multiple=True,
    help="Collected path to leave out of the verification code.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the comparison as JSON.")
@click.pass_context
def verify(
    ctx: click.Context,
    path: str,
    expected: str,
    excludes: tuple[str, ...],
    excluded_names: tuple[str, ...],
    json_output: bool,
) -> None:
    """Recompute the verification code for PATH and compare it with EXPECTED."""
    result = _run_collection(
        ctx,
        path,
        excludes=excludes,
        excluded_names=excluded_names,
        best_effort=False,
        no_follow_symlinks=False,
        classification_table=None,
        json_output=json_output,
    )
    code = result.verification_code
    matches = code.value == expected.strip().lower()

    if json_output:
        console.print_json(data={"expected": expected, "actual": code.value, "match": matches})
    elif matches:
        console.print(f"[green]Verification code matches: {code.value}[/green]")
    else:
        console.print(
            f"[red]Verification code mismatch: expected {expected}, got {code.value}[/red]"
        )
    if not matches:
        raise SystemExit(1)


@cli.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_context
def classify(ctx: click.Context, names: tuple[str, ...]) -> None:
    """Show the category assigned to each file NAME."""
    config = _load_config(ctx, None, json_output=False)
    try:
        classifier = _build_classifier(config)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    table = Table()
    table.add_column("Name")
    table.add_column("Extension")
    table.add_column("Category")
    for name in names:
        table.add_row(name, extension_of(name) or "-", classifier.classify_name(name).value)
    console.print(table)


@cli.group()
def config() -> None:
    """Manage spdxtree configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        effective = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
@click.option(
    "--append",
    is_flag=True,
    help="Add VALUE to a list setting such as collection.exclude_patterns.",
)
def config_set(key: str, value: str, append: bool) -> None:
    """Persist VALUE for the dotted KEY in the configuration file.

    List settings take a JSON array, or a single item that replaces the list
    (or is added to it with ``--append``). The updated file must still yield a
    valid configuration, including a readable classification table.

    Raises:
        click.ClickException: If KEY is unknown or the result is invalid.
    """
    path = tuple(segment.strip() for segment in key.split(".") if segment.strip())
    if path not in SETTING_TYPES:
        raise click.ClickException(f"Unknown configuration key {key!r}.")
    if append and path not in LIST_SETTINGS:
        raise click.ClickException(f"--append only applies to list settings; {key} is not one.")

    manager = ConfigManager()
    try:
        file_data = manager.load_file_overrides()
        previous: Any = resolve_with_precedence(
            defaults=SpdxTreeConfig(), file_overrides=file_data
        ).model_dump(mode="python")
        for segment in path:
            previous = previous[segment]
        updated = parse_setting_value(path, value)
        if append:
            updated = [*previous, *updated]
        file_data = merge_settings(
            file_data, expand_dotted({".".join(path): updated}, source_name="cli")
        )
        _build_classifier(
            resolve_with_precedence(defaults=SpdxTreeConfig(), file_overrides=file_data)
        )
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    dotted = ".".join(path)
    if updated == previous:
        console.print(
            f"[yellow]{dotted} is already {escape(repr(previous))}; nothing changed.[/yellow]"
        )
        return
    manager.save(file_data)
    console.print(f"[green]{dotted}: {escape(repr(previous))} -> {escape(repr(updated))}[/green]")


@config.command("env")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when rendering.")
def config_env(no_env: bool) -> None:
    """Print the effective configuration as shell ``export`` lines.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    try:
        effective = ConfigManager().load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    for name, rendered in flatten_for_env(effective).items():
        click.echo(f"export {name}={shlex.quote(rendered)}")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session.

    Raises:
        click.ClickException: If edited content is invalid.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")
    if edited is None or edited == original:
        console.print("[yellow]No changes applied.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc
    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        _build_classifier(
            resolve_with_precedence(defaults=SpdxTreeConfig(), file_overrides=parsed)
        )
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
