"""CLI interface for dirsize."""

from __future__ import annotations

import json
import logging
import os
import sys

import click

from dirsize.core.deletion import DeletionService
from dirsize.core.engine import ScanEngine
from dirsize.settings import Settings
from dirsize.utils import bytes_to_human, format_elapsed, normalize_path


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """dirsize: find out which entries of a directory take up the space."""
    _setup_logging(verbose)


# ── scan ─────────────────────────────────────────────────────────────────

@main.command()
@click.argument("root", required=False, type=click.Path())
@click.option("--top", "-n", type=click.IntRange(min=1), default=None, help="Show only the N largest entries")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None, help="Number of parallel workers")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def scan(root: str | None, top: int | None, workers: int | None, as_json: bool) -> None:
    """Size every entry directly inside ROOT, largest first."""
    settings = Settings()
    if root is None:
        root = settings.get("paths.last_root") or os.getcwd()
    root = os.path.abspath(root)

    # The terminal observes progress directly, no grace delay needed.
    engine = ScanEngine(
        max_workers=workers or settings.get("scan.max_workers"),
        grace_delay=0,
    )

    if as_json:
        engine.scan_sync(root)
    else:
        click.echo(f"\n{click.style('🔍', bold=True)} Scanning {normalize_path(root)}\n")
        engine.scan(root)
        shown = 0
        with click.progressbar(length=100, label="  Sizing entries", show_percent=True) as bar:
            while not engine.wait(0.1):
                percent = engine.progress.percent
                bar.update(percent - shown)
                shown = percent
            bar.update(100 - shown)

    settings.set("paths.last_root", normalize_path(root))

    entries = engine.store.snapshot()
    total = sum(e.size_bytes for e in entries)
    if top is not None:
        entries = entries[:top]

    if as_json:
        data = {
            "root": normalize_path(root),
            "total_bytes": total,
            "entries": [
                {"path": e.path, "size_bytes": e.size_bytes, "size": bytes_to_human(e.size_bytes)}
                for e in entries
            ],
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo()
    if not entries:
        click.echo("  Nothing found.")
    for entry in entries:
        size_str = bytes_to_human(entry.size_bytes)
        click.echo(f"  {click.style(f'{size_str:>12s}', fg='green', bold=True)}  {entry.path}")

    elapsed = format_elapsed(engine.last_elapsed or 0)
    click.echo(f"\nTotal: {click.style(bytes_to_human(total), fg='green', bold=True)} (scanned in {elapsed})\n")


# ── trash ────────────────────────────────────────────────────────────────

@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def trash(paths: tuple[str, ...], yes: bool) -> None:
    """Move PATHS to the trash."""
    if not yes:
        for path in paths:
            click.echo(f"  {normalize_path(path)}")
        if not click.confirm(f"\nMove {len(paths)} item(s) to the trash?", default=False):
            click.echo("Aborted.")
            return

    deleter = DeletionService()
    futures = [(path, deleter.delete(path)) for path in paths]
    deleter.shutdown(wait=True)

    failed = 0
    for path, future in futures:
        if future.result():
            click.echo(f"  {click.style('✓', fg='green')} {normalize_path(path)}")
        else:
            failed += 1
            click.echo(f"  {click.style('✗', fg='red')} {normalize_path(path)}: could not move to trash")

    if failed:
        sys.exit(1)


# ── config ───────────────────────────────────────────────────────────────

@main.command()
@click.argument("key", required=False)
@click.argument("value", required=False)
def config(key: str | None, value: str | None) -> None:
    """Show all settings, show KEY, or set KEY to VALUE.

    VALUE is parsed as JSON when possible (numbers, null, true/false),
    otherwise stored as a plain string.
    """
    settings = Settings()

    if key is None:
        click.echo(json.dumps(settings.as_dict(), indent=2))
        return

    if value is None:
        click.echo(json.dumps(settings.get(key)))
        return

    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    settings.set(key, parsed)
    click.echo(f"{key} = {json.dumps(parsed)}")


# ── service ──────────────────────────────────────────────────────────────

@main.group()
def service() -> None:
    """D-Bus service management."""


@service.command("start")
def service_start() -> None:
    """Start the D-Bus service in foreground."""
    from dirsize.dbus_service import start_service

    click.echo("Starting dirsize D-Bus service...")
    start_service()
