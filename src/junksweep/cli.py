"""CLI interface for junksweep."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from junksweep.core.classifier import JUNK_RULES
from junksweep.core.engine import JunkScanner
from junksweep.core.tracker import Tracker
from junksweep.models.scan_result import JunkEntry, ScanPolicy, ScanResult
from junksweep.settings import Settings
from junksweep.utils import bytes_to_human, format_relative_time


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _resolve_policy(settings: Settings, deep: bool | None) -> ScanPolicy:
    if deep is None:
        deep = bool(settings.get("scan.deep", False))
    return ScanPolicy.from_flag(deep)


def _run_scan(scanner: JunkScanner, root: Path, policy: ScanPolicy) -> ScanResult:
    future = scanner.scan(root, policy)
    try:
        return future.result()
    except KeyboardInterrupt:
        scanner.cancel()
        return future.result()


def _entry_to_dict(entry: JunkEntry) -> dict:
    return {
        "id": str(entry.id),
        "path": str(entry.path),
        "name": entry.name,
        "size_bytes": entry.size_bytes,
        "is_dir": entry.is_dir,
        "rule": entry.rule,
    }


def _print_entries(result: ScanResult) -> None:
    for i, entry in enumerate(result.entries, 1):
        try:
            shown = entry.path.relative_to(result.root)
        except ValueError:
            shown = entry.path
        kind = click.style(" [folder]", fg="yellow") if entry.is_dir else ""
        click.echo(
            f"  [{i}] {str(shown):50s} {bytes_to_human(entry.size_bytes):>10s}"
            f"  {click.style(entry.rule, fg='bright_black')}{kind}"
        )


_path_arg = click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, readable=True, path_type=Path),
)
_deep_opt = click.option(
    "--deep/--shallow",
    "deep",
    default=None,
    help="Recurse into subdirectories (default from settings: scan.deep)",
)


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file to use instead of the default",
)
@click.pass_context
def main(ctx: click.Context, verbose: int, config_path: Path | None) -> None:
    """junksweep: remove .DS_Store, ._* and Windows junk from a volume."""
    _setup_logging(verbose)
    ctx.obj = Settings(config_path)


# ── scan ─────────────────────────────────────────────────────────────────

@main.command()
@_path_arg
@_deep_opt
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def scan(settings: Settings, path: Path, deep: bool | None, as_json: bool) -> None:
    """Scan PATH for junk files (preview only, never deletes)."""
    policy = _resolve_policy(settings, deep)

    if not as_json:
        click.echo(f"\n{click.style('🔍', bold=True)} Scanning {path} ({policy.value})...\n")

    with JunkScanner(max_depth=int(settings.get("scan.max_depth"))) as scanner:
        result = _run_scan(scanner, path, policy)

    if as_json:
        data = {
            "root": str(result.root),
            "policy": result.policy.value,
            "count": result.count,
            "total_bytes": result.total_bytes,
            "summary": result.summary,
            "cancelled": result.cancelled,
            "errors": result.errors,
            "entries": [_entry_to_dict(e) for e in result.entries],
        }
        click.echo(json.dumps(data, indent=2))
        return

    _print_entries(result)
    if result.errors:
        click.echo(f"\n  {click.style('!', fg='yellow')} {len(result.errors)} path(s) could not be read (use -v)")
    click.echo(
        f"\n{result.summary} Reclaimable: "
        f"{click.style(bytes_to_human(result.total_bytes), fg='green', bold=True)}\n"
    )


# ── clean ────────────────────────────────────────────────────────────────

@main.command()
@_path_arg
@_deep_opt
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--dry-run", is_flag=True, help="Show what would be cleaned without doing it")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def clean(settings: Settings, path: Path, deep: bool | None, yes: bool, dry_run: bool, as_json: bool) -> None:
    """Scan PATH and delete the junk files found."""
    policy = _resolve_policy(settings, deep)
    tracker = Tracker()

    if not as_json:
        click.echo(f"\n{click.style('🔍', bold=True)} Scanning {path} ({policy.value})...\n")

    with JunkScanner(max_depth=int(settings.get("scan.max_depth"))) as scanner:
        result = _run_scan(scanner, path, policy)

        if result.cancelled or not result.entries:
            if as_json:
                status = "cancelled" if result.cancelled else "nothing_to_clean"
                click.echo(json.dumps({"status": status, "files_deleted": 0, "bytes_freed": 0}))
            else:
                click.echo("Scan cancelled." if result.cancelled else "Nothing to clean.")
            return

        selection = list(result.entries)

        if not as_json:
            _print_entries(result)
            click.echo(f"\nTotal: {click.style(bytes_to_human(result.total_bytes), fg='green', bold=True)}\n")

        if dry_run:
            if as_json:
                data = {
                    "status": "dry_run",
                    "would_delete": len(selection),
                    "would_free_bytes": result.total_bytes,
                    "entries": [_entry_to_dict(e) for e in selection],
                }
                click.echo(json.dumps(data, indent=2))
            else:
                click.echo("(dry run, no files were deleted)")
            return

        if not yes and not as_json:
            choice = click.prompt(f"Delete {len(selection)} files? [y/N/select]", default="n", show_default=False)
            match choice.lower():
                case "y" | "yes":
                    pass
                case "select":
                    selection = _interactive_select(selection)
                    if not selection:
                        click.echo("Nothing selected.")
                        return
                case _:
                    click.echo("Aborted.")
                    return

        if not as_json:
            click.echo(f"\n{click.style('🧹', bold=True)} Cleaning...\n")

        report = scanner.clean(selection)

    tracker.record(report, root=result.root)
    tracker.save_session()

    if as_json:
        data = {
            "status": "cleaned",
            "files_deleted": report.files_deleted,
            "bytes_freed": report.bytes_freed,
            "errors": report.errors,
        }
        click.echo(json.dumps(data, indent=2))
        return

    for error in report.errors:
        click.echo(f"  {click.style('!', fg='yellow')} {error}")
    click.echo(
        f"{report.summary} Freed "
        f"{click.style(bytes_to_human(report.bytes_freed), fg='green', bold=True)}\n"
    )


def _interactive_select(entries: list[JunkEntry]) -> list[JunkEntry]:
    """Let the user pick which entries to delete by their listed number."""
    raw = click.prompt("Selection (comma-separated numbers)", default="")
    if not raw.strip():
        return []
    picked: dict[int, JunkEntry] = {}
    for part in raw.split(","):
        part = part.strip()
        if part.isdigit():
            idx = int(part) - 1
            if 0 <= idx < len(entries):
                picked[idx] = entries[idx]
    return [picked[i] for i in sorted(picked)]


# ── stats ────────────────────────────────────────────────────────────────

@main.command()
@click.option("--period", "-p", default="all", type=click.Choice(["today", "week", "month", "all"]))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(period: str, as_json: bool) -> None:
    """Show junk removal statistics."""
    tracker = Tracker()
    data = tracker.get_stats(period)
    data["last_clean"] = tracker.get_last_clean_time()

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"\n{click.style('📊', bold=True)} Statistics ({period})\n")
    click.echo(f"  Bytes freed:    {click.style(bytes_to_human(data['bytes_freed']), fg='green', bold=True)}")
    click.echo(f"  Files deleted:  {data['files_deleted']:,}")
    click.echo(f"  Sessions:       {data['session_count']}")
    last = format_relative_time(data["last_clean"]) if data["last_clean"] else "never"
    click.echo(f"  Last clean:     {last}")
    click.echo(
        f"  Lifetime total: {click.style(bytes_to_human(data['lifetime_bytes_freed']), fg='cyan', bold=True)}"
        f" in {data['lifetime_files_deleted']:,} files"
    )

    if data["per_root"]:
        click.echo("\n  Per-volume breakdown:")
        for root, rstats in sorted(data["per_root"].items(), key=lambda x: x[1]["bytes_freed"], reverse=True):
            click.echo(f"    {root or '(unknown)':40s} {bytes_to_human(rstats['bytes_freed']):>10s}"
                       f"  ({rstats['files_deleted']:,} files)")
    click.echo()


# ── rules ────────────────────────────────────────────────────────────────

@main.command()
def rules() -> None:
    """List the junk file rules."""
    for rule in JUNK_RULES:
        folders = click.style(" [folders too]", fg="yellow") if rule.folder_allowed else ""
        patterns = ", ".join(rule.patterns)
        click.echo(f"  {click.style(rule.id, fg='cyan', bold=True):30s}  {rule.kind:13s} {patterns}{folders}")
        click.echo(f"    {rule.description}")


# ── config ───────────────────────────────────────────────────────────────

@main.group()
def config() -> None:
    """Settings management commands."""


@config.command("show")
@click.pass_obj
def config_show(settings: Settings) -> None:
    """Show effective settings."""
    click.echo(f"# {settings.path}")
    click.echo(json.dumps(settings.as_dict(), indent=2))


@config.command("set")
@click.argument("key", type=click.Choice(["scan.deep", "scan.max_depth"]))
@click.argument("value")
@click.pass_obj
def config_set(settings: Settings, key: str, value: str) -> None:
    """Set a setting value."""
    if key == "scan.deep":
        parsed = click.BOOL.convert(value, None, None)
    else:
        parsed = click.IntRange(min=0).convert(value, None, None)
    settings.set(key, parsed)
    click.echo(f"{key} = {json.dumps(parsed)}")
