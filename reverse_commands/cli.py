from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import block
from .config import Settings, load_settings
from .errors import EXIT_OK, NoCandidatesError, ReverseCommandsError
from .pipeline import PipelineResult, build_wrappers
from .render import render_block
from .resolver import CommandResolver
from .safety import CONFIRM_TOKEN, Resolver, SafetyPolicy
from .scanner import scan_candidates, split_search_path
from .state import RunReport


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def parse_args(argv: Optional[Sequence[str]] = None):
    p = argparse.ArgumentParser(
        prog="reverse-commands",
        description="Install per-user shell wrappers named after reversed commands (ls -> sl).",
    )
    p.add_argument("action", choices=("install", "uninstall"), help="Add or remove the wrapper block")
    p.add_argument("--path-filter", metavar="DIRS", help="Colon-separated directories to scan (default: $PATH)")
    p.add_argument("--rc-file", metavar="FILE", help="Startup file to edit (default: ~/.bashrc)")
    p.add_argument("--dry-run", action="store_true", help="Show the plan without touching any file")
    p.add_argument("--force-sensitive", action="store_true", help="Also wrap blocklisted admin commands")
    p.add_argument("--confirm", metavar="TOKEN", help=f'Required with --force-sensitive: "{CONFIRM_TOKEN}"')
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return p.parse_args(argv)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def plan(settings: Settings, policy: SafetyPolicy, resolver: Optional[Resolver] = None) -> RunReport:
    """Scan, filter and transform; no file is touched."""
    candidates = scan_candidates(split_search_path(settings.search_path), builtins=settings.builtins)
    # Only reachable when REVCMD_BUILTINS is set empty and no directory holds executables
    if not candidates:
        raise NoCandidatesError(settings.search_path)
    if resolver is None:
        resolver = CommandResolver(settings.search_path)
    result: PipelineResult = build_wrappers(candidates, policy, resolver)
    logger.debug(
        "%d candidates -> %d wrappers, %d skipped",
        len(candidates),
        len(result.wrappers),
        len(result.skipped),
    )
    return {
        "candidate_count": len(candidates),
        "wrappers": list(result.wrappers),
        "skipped": list(result.skipped),
        "skip_counts": result.skip_counts(),
    }


def _wrapper_table(report: RunReport, limit: Optional[int] = None) -> Table:
    table = Table(show_header=True, header_style="bold cyan", box=None, pad_edge=False)
    table.add_column("Command")
    table.add_column("Reversed")
    table.add_column("Function", style="dim")
    wrappers = report.get("wrappers") or []
    for spec in wrappers[:limit] if limit is not None else wrappers:
        ident = spec.identifier if spec.identifier != spec.reversed else ""
        table.add_row(escape(spec.original), escape(spec.reversed), escape(ident))
    return table


def _print_skipped(console: Console, report: RunReport, limit: int, title: str) -> None:
    skipped = report.get("skipped") or []
    if not skipped:
        return
    counts = report.get("skip_counts") or {}
    totals = ", ".join(f"{reason}: {count}" for reason, count in counts.items())
    console.print(f"[bold]{title}[/] ({len(skipped)} total; {totals}):")
    for name, reason in skipped[:limit]:
        console.print(f"  {escape(name):<20} -> [yellow]{reason}[/]")


def _install(settings: Settings, report: RunReport, dry_run: bool, console: Console) -> int:
    wrappers = report.get("wrappers") or []
    limit = settings.sample_size

    console.print(f"Scanned {report.get('candidate_count', 0)} candidate commands.")

    if not wrappers:
        console.print("No safe candidates to wrap after filtering. Exiting.")
        _print_skipped(console, report, limit, "Summary of skipped commands (sample)")
        return EXIT_OK

    if dry_run:
        console.print(f"[bold]DRY RUN:[/] planned wrappers (count: {len(wrappers)}):")
        console.print(_wrapper_table(report))
        console.print()
        _print_skipped(console, report, limit, "Skipped examples (reason)")
        console.print()
        console.print("To perform actual install, run: [cyan]reverse-commands install[/]")
        return EXIT_OK

    result = block.install(settings.rc_file, render_block(wrappers))

    verb = "Replaced" if result.replaced else "Installed"
    console.print(f"[green]{verb} reversed-command wrappers in {escape(str(settings.rc_file))}.[/]")
    console.print(f"Wrapped commands count: {len(wrappers)}")
    console.print(f"Examples (first {limit}):")
    console.print(_wrapper_table(report, limit))
    console.print()
    _print_skipped(console, report, limit, "SKIPPED examples (reason)")
    console.print()
    console.print(f"To activate immediately: [cyan]source {escape(str(settings.rc_file))}[/]")
    console.print("To uninstall: [cyan]reverse-commands uninstall[/]")
    return EXIT_OK


def _uninstall(settings: Settings, dry_run: bool, console: Console) -> int:
    rc_file = escape(str(settings.rc_file))

    if dry_run:
        present = block.has_block(settings.rc_file)
        if present:
            console.print(f"DRY RUN: would remove the installed block from {rc_file}.")
        else:
            console.print(f"DRY RUN: no installed block found in {rc_file}. Nothing to do.")
        return EXIT_OK

    result = block.uninstall(settings.rc_file)
    if not result.removed:
        console.print(f"No installed block found in {rc_file}. Nothing to do.")
        return EXIT_OK

    console.print(f"[green]Removed reversed-command block from {rc_file}.[/]")
    console.print(
        f"If your shell already sourced the block, run [cyan]source {rc_file}[/] or open a new terminal."
    )
    return EXIT_OK


def run(
    argv: Optional[Sequence[str]] = None,
    console: Optional[Console] = None,
    err_console: Optional[Console] = None,
    resolver: Optional[Resolver] = None,
) -> int:
    args = parse_args(argv)
    _setup_logging(args.verbose)
    console = console or Console()
    err_console = err_console or Console(stderr=True)

    try:
        settings = load_settings().with_overrides(rc_file=args.rc_file, search_path=args.path_filter)
        # Checked before any action so a bad token never touches the file
        policy = SafetyPolicy.from_flags(force=args.force_sensitive, confirm=args.confirm)
        if args.action == "uninstall":
            return _uninstall(settings, args.dry_run, console)

        if policy.force:
            console.print(
                "[bold yellow]WARNING:[/] You have explicitly opted into wrapping sensitive commands. "
                "This can break your system. Proceed with caution."
            )
        report = plan(settings, policy, resolver)
        return _install(settings, report, args.dry_run, console)
    except ReverseCommandsError as exc:
        err_console.print(f"[bold red]Error:[/] {escape(str(exc))}")
        return exc.exit_code


def main(argv: Optional[Sequence[str]] = None) -> None:
    raise SystemExit(run(argv))
