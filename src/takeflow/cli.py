"""Command line interface for takeflow."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional, Sequence, TypeVar

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from takeflow.config import ConfigError, ConfigManager, TakeflowConfig
from takeflow.log import configure_logging
from takeflow.orchestration import IncomingController, NotPendingError
from takeflow.orchestration.models import DiscardSummary
from takeflow.service import (
    FileService,
    HttpFileService,
    OperationError,
    TakeflowError,
    TemplateValidationError,
    TransportError,
)

console = Console()

T = TypeVar("T")


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """

    if quiet and mode != "error":
        return
    if summary_only and mode not in {"summary", "warning", "error"}:
        return
    console.print(message)


def _error_code(exc: TakeflowError) -> str:
    if isinstance(exc, TemplateValidationError):
        return "validation_error"
    if isinstance(exc, OperationError):
        return "operation_error"
    if isinstance(exc, TransportError):
        return "transport_error"
    if isinstance(exc, NotPendingError):
        return "not_pending"
    return "takeflow_error"


def _load_config(ctx: click.Context) -> TakeflowConfig:
    """Load configuration with CLI overrides collected on the root command."""
    state = ctx.find_root().obj or {}
    overrides = state.get("overrides", {})
    try:
        config = ConfigManager().load(cli_overrides=overrides)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(config.logging, verbose=state.get("verbose", False))
    return config


def _build_service(config: TakeflowConfig) -> FileService:
    """Return the file service the CLI talks to."""
    return HttpFileService.from_settings(config.service)


def _run(
    config: TakeflowConfig,
    operation: Callable[[IncomingController], Awaitable[T]],
    *,
    initialize: bool = True,
) -> T:
    """Run ``operation`` against a controller wired to the configured service."""

    async def _main() -> T:
        service = _build_service(config)
        try:
            controller = IncomingController(service, config)
            if initialize:
                await controller.initialize()
            return await operation(controller)
        finally:
            await service.aclose()

    return asyncio.run(_main())


def _apply_naming_options(
    controller: IncomingController,
    *,
    chapter: Optional[str],
    sequence: Optional[str],
    name: Optional[str],
    tags: Sequence[str],
    custom_tag: Optional[str],
) -> None:
    changes: dict[str, Any] = {}
    if chapter is not None:
        changes["chapter"] = chapter
    if sequence is not None:
        changes["sequence"] = sequence
    if name is not None:
        changes["name"] = name
    if tags:
        changes["tags"] = list(tags)
    if custom_tag is not None:
        changes["custom_tag"] = custom_tag
    if changes:
        controller.update_template(**changes)


def _summary_payload(summary: DiscardSummary) -> dict[str, int]:
    return {"success_count": summary.success_count, "failed_count": summary.failed_count}


def _naming_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the shared naming template options to ``command``."""
    options = [
        click.option("--chapter", type=str, help="Two-digit chapter, e.g. 01."),
        click.option("--sequence", type=str, help="Sequence number; pass '' to omit it."),
        click.option("--name", type=str, help="Free-text name, kebab-cased in the filename."),
        click.option("--tag", "tags", multiple=True, help="Tag code; repeat for several tags."),
        click.option("--custom-tag", type=str, help="One-off tag, upper-cased."),
    ]
    for option in reversed(options):
        command = option(command)
    return command


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="takeflow")
@click.option("--base-url", type=str, help="Override the file service URL.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, base_url: Optional[str], verbose: bool) -> None:
    """Rank, rename, discard and undo freshly recorded takes."""
    overrides: dict[str, Any] = {}
    if base_url:
        overrides["service.base_url"] = base_url
    ctx.obj = {"overrides": overrides, "verbose": verbose}


@cli.command()
@_naming_options
@click.option("--json", "json_output", is_flag=True, help="Emit JSON instead of text.")
@click.pass_context
def preview(
    ctx: click.Context,
    chapter: Optional[str],
    sequence: Optional[str],
    name: Optional[str],
    tags: tuple[str, ...],
    custom_tag: Optional[str],
    json_output: bool,
) -> None:
    """Show the filename a rename would produce for the given naming."""
    config = _load_config(ctx)

    async def _preview(controller: IncomingController) -> str:
        _apply_naming_options(
            controller,
            chapter=chapter,
            sequence=sequence,
            name=name,
            tags=tags,
            custom_tag=custom_tag,
        )
        return controller.preview()

    try:
        filename = _run(config, _preview)
    except TakeflowError as exc:
        _handle_cli_error(str(exc), code=_error_code(exc), json_output=json_output, original=exc)
        return

    if json_output:
        console.print_json(data={"filename": filename})
        return
    console.print(filename, markup=False, highlight=False)


@cli.command()
@click.option("--json", "json_output", is_flag=True, help="Emit JSON instead of a table.")
@click.pass_context
def pending(ctx: click.Context, json_output: bool) -> None:
    """List pending recordings with their take rank."""
    config = _load_config(ctx)

    async def _list(controller: IncomingController) -> list[dict[str, Any]]:
        ranking = controller.ranking()
        return [
            {
                **file.model_dump(mode="json", by_alias=True),
                "rank": ranking.rank_of(file.path),
            }
            for file in controller.pending()
        ]

    try:
        rows = _run(config, _list)
    except TakeflowError as exc:
        _handle_cli_error(str(exc), code=_error_code(exc), json_output=json_output, original=exc)
        return

    if json_output:
        console.print_json(data={"files": rows})
        return

    if not rows:
        console.print("[yellow]No pending recordings.[/yellow]")
        return

    table = Table(title="Pending recordings")
    table.add_column("Rank")
    table.add_column("Filename")
    table.add_column("Size", justify="right")
    table.add_column("Captured")
    for row in rows:
        rank = {"best": "[green]best[/green]", "good": "[yellow]good[/yellow]"}.get(row["rank"], "")
        table.add_row(rank, row["filename"], f"{row['size']:,}", str(row["timestamp"]))
    console.print(table)


@cli.command()
@click.argument("path", type=str)
@_naming_options
@click.option("--discard-rest", is_flag=True, help="Trash the other pending files afterwards.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the rename.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def rename(
    ctx: click.Context,
    path: str,
    chapter: Optional[str],
    sequence: Optional[str],
    name: Optional[str],
    tags: tuple[str, ...],
    custom_tag: Optional[str],
    discard_rest: bool,
    json_output: bool,
    quiet: bool,
) -> None:
    """Rename the pending recording at PATH using the suggested naming and options."""
    config = _load_config(ctx)
    quiet_enabled = (quiet or config.cli.quiet_default) and not json_output
    summary_enabled = config.cli.summary_default and not json_output

    async def _rename(controller: IncomingController) -> dict[str, Any]:
        _apply_naming_options(
            controller,
            chapter=chapter,
            sequence=sequence,
            name=name,
            tags=tags,
            custom_tag=custom_tag,
        )
        outcome = await controller.rename(path)
        payload: dict[str, Any] = {
            "original_path": outcome.original_path,
            "new_path": outcome.new_path,
            "filename": outcome.filename,
            "next_sequence": controller.template.sequence,
            "remaining": outcome.discard_prompt.remaining_count if outcome.discard_prompt else 0,
            "discarded": None,
        }
        if discard_rest and controller.discard_prompt is not None:
            payload["discarded"] = _summary_payload(await controller.accept_discard_prompt())
        return payload

    try:
        payload = _run(config, _rename)
    except TakeflowError as exc:
        _handle_cli_error(str(exc), code=_error_code(exc), json_output=json_output, original=exc)
        return

    if json_output:
        console.print_json(data=payload)
        return

    _emit_message(
        f"[green]Renamed to: {payload['filename']}[/green]",
        mode="summary",
        quiet=quiet_enabled,
        summary_only=summary_enabled,
    )
    if payload["discarded"] is not None:
        discarded = payload["discarded"]
        _emit_message(
            f"Moved {discarded['success_count']} file(s) to trash"
            + (f", {discarded['failed_count']} failed." if discarded["failed_count"] else "."),
            mode="summary",
            quiet=quiet_enabled,
            summary_only=summary_enabled,
        )
    elif payload["remaining"]:
        _emit_message(
            f"[yellow]{payload['remaining']} file(s) still pending; "
            "use --discard-rest or `takeflow discard --all` to trash them.[/yellow]",
            mode="warning",
            quiet=quiet_enabled,
            summary_only=summary_enabled,
        )


@cli.command()
@click.argument("paths", nargs=-1, type=str)
@click.option("--all", "discard_all", is_flag=True, help="Trash every pending recording.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON counts.")
@click.pass_context
def discard(
    ctx: click.Context, paths: tuple[str, ...], discard_all: bool, json_output: bool
) -> None:
    """Move PATHS (or every pending recording with --all) to trash."""
    if not paths and not discard_all:
        raise click.UsageError("Provide at least one PATH or --all.")
    config = _load_config(ctx)

    async def _discard(controller: IncomingController) -> DiscardSummary:
        if discard_all:
            return await controller.discard_all()
        return await controller.discard_many(paths)

    try:
        summary = _run(config, _discard, initialize=discard_all)
    except TakeflowError as exc:
        _handle_cli_error(str(exc), code=_error_code(exc), json_output=json_output, original=exc)
        return

    if json_output:
        console.print_json(data=_summary_payload(summary))
        return
    message = f"Moved {summary.success_count} file(s) to trash"
    if summary.failed_count:
        console.print(f"[red]{message}, {summary.failed_count} failed.[/red]")
        raise SystemExit(1)
    console.print(f"[green]{message}.[/green]")


@cli.command()
@click.argument("rename_id", required=False, type=str)
@click.option("--json", "json_output", is_flag=True, help="Emit JSON instead of text.")
@click.pass_context
def undo(ctx: click.Context, rename_id: Optional[str], json_output: bool) -> None:
    """List recent renames, or undo the rename RENAME_ID."""
    config = _load_config(ctx)

    if rename_id is None:

        async def _entries(controller: IncomingController) -> list[dict[str, Any]]:
            return [
                entry.model_dump(mode="json", by_alias=True)
                for entry in await controller.undo_entries()
            ]

        try:
            entries = _run(config, _entries, initialize=False)
        except TakeflowError as exc:
            _handle_cli_error(
                str(exc), code=_error_code(exc), json_output=json_output, original=exc
            )
            return

        if json_output:
            console.print_json(data={"renames": entries})
            return
        if not entries:
            console.print("[yellow]No renames available to undo.[/yellow]")
            return
        table = Table(title="Recent renames")
        table.add_column("ID")
        table.add_column("Original")
        table.add_column("Renamed to")
        table.add_column("When")
        for entry in entries:
            table.add_row(entry["id"], entry["originalName"], entry["newName"], entry["createdAt"])
        console.print(table)
        return

    async def _undo(controller: IncomingController) -> dict[str, Any]:
        outcome = await controller.undo(rename_id)
        return {"id": outcome.rename_id, "original_name": outcome.original_name}

    try:
        payload = _run(config, _undo, initialize=False)
    except TakeflowError as exc:
        _handle_cli_error(str(exc), code=_error_code(exc), json_output=json_output, original=exc)
        return

    if json_output:
        console.print_json(data=payload)
        return
    console.print(f"[green]Undone: {payload['original_name']}[/green]")


@cli.group()
def config() -> None:
    """Inspect or update the takeflow configuration."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON instead of YAML.")
def config_view(no_env: bool, json_output: bool) -> None:
    """Print the effective configuration as YAML."""
    manager = ConfigManager()
    try:
        effective = manager.load(include_env=not no_env)
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
        return
    if json_output:
        console.print_json(data=effective.model_dump(mode="json"))
        return
    rendered = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(rendered, "yaml", theme="ansi_dark", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the change.")
def config_set(key: str, value: str, json_output: bool) -> None:
    """Persist KEY (dotted, e.g. ranking.substantial_bytes) with VALUE."""
    manager = ConfigManager()
    try:
        parsed = yaml.safe_load(value)
        previous = manager.set_value(key, parsed)
    except yaml.YAMLError as exc:
        _handle_cli_error(
            f"Unable to parse value for {key}: {exc}",
            code="config_error",
            json_output=json_output,
            original=exc,
        )
        return
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
        return

    if json_output:
        console.print_json(data={"key": key, "previous": previous, "value": parsed})
        return
    console.print(
        f"Updated {key}: {previous!r} -> {parsed!r}", style="green", markup=False, highlight=False
    )


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
