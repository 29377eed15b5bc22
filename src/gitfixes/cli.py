"""Command-line interface for GitFixes."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog
import typer
from pydantic import ValidationError
from pydantic_settings import SettingsError
from rich.console import Console
from rich.markup import escape

from gitfixes.database import (
    Blacklist,
    KnownCommitIndex,
    PathBlacklist,
    PathMap,
    SeriesScanner,
    default_output_name,
    write_entries,
)
from gitfixes.extraction import GitExtractor, RepositoryError
from gitfixes.models import FixesOptions, Settings, WhoOptions
from gitfixes.pipeline import FixesSession, OwnershipQuery, format_machine, format_report, load_ignore

app = typer.Typer(
    name="gitfixes",
    help="Find commits that fix tracked changes and who should take care of them",
    add_completion=False,
)
console = Console(highlight=False, soft_wrap=True)


def stderr_logger(*args) -> structlog.PrintLogger:
    # Resolves sys.stderr on every call
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str) -> None:
    """Send structured log output to stderr, filtered at ``level``."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=stderr_logger,
        cache_logger_on_first_use=False,
    )


def expand_home(value: str) -> Path:
    """Expand a leading ``~/`` like git does for path-valued config keys."""
    return Path(value).expanduser()


def config_path(
    option: Optional[Path],
    setting: Optional[Path],
    extractor: GitExtractor,
    key: str,
) -> Optional[Path]:
    """Pick a database path: CLI option, then environment setting, then git config."""
    if option is not None:
        return option
    if setting is not None:
        return setting
    value = extractor.config_value(key)
    return expand_home(value) if value else None


def print_lines(lines: List[str]) -> None:
    for line in lines:
        console.print(escape(line))


def open_repository(repo_path: Path, settings: Settings, verbose: bool) -> GitExtractor:
    configure_logging("DEBUG" if verbose else settings.log_level)
    return GitExtractor(repo_path)


@app.command()
def fixes(
    revision: str = typer.Argument("HEAD", help="Revision or range to search"),
    paths: Optional[List[str]] = typer.Argument(None, help="Only report fixes touching these paths"),
    repo_path: Path = typer.Option(Path("."), "--repo", "-r", help="Path to Git repository"),
    fixes_file: Optional[Path] = typer.Option(None, "--file", "-f", help="Known-commit database"),
    committer: Optional[str] = typer.Option(None, "--committer", "-c", help="Only show fixes for this owner"),
    show_all: bool = typer.Option(False, "--all", "-a", help="Show fixes for all owners"),
    match_all: bool = typer.Option(False, "--match-all", "-m", help="Match every reference, not only 'Fixes:' lines"),
    no_grouping: bool = typer.Option(False, "--no-grouping", help="Do not group results by owner"),
    reverse: bool = typer.Option(True, "--reverse/--no-reverse", help="Walk oldest commits first"),
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Walk from the merge base with this revision"),
    stable_only: bool = typer.Option(False, "--stable", help="Only show fixes marked for stable"),
    blacklist_file: Optional[Path] = typer.Option(None, "--blacklist", help="File of commit ids to ignore"),
    path_blacklist_file: Optional[Path] = typer.Option(None, "--path-blacklist", help="File of path prefixes to ignore"),
    domains: Optional[List[str]] = typer.Option(None, "--domain", help="Email domain whose authors own their fixes"),
    machine: bool = typer.Option(False, "--machine", help="Print owner;id;path;subject records"),
    stats: bool = typer.Option(False, "--stats", "-s", help="Print walk statistics"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Find commits that fix commits listed in the known-commit database."""
    try:
        settings = Settings()
        extractor = open_repository(repo_path, settings, verbose)

        database = config_path(fixes_file, settings.fixes_file, extractor, "fixes.file")
        if database is None:
            raise typer.BadParameter("No known-commit database given (--file or git config fixes.file)")
        if not database.exists():
            raise typer.BadParameter(f"Known-commit database not found: {database}")

        if committer is None:
            committer = extractor.config_value("user.email") or ""

        options = FixesOptions(
            revision=revision,
            base=base,
            reverse=reverse,
            committer=committer,
            show_all=show_all,
            match_all=match_all,
            no_group=no_grouping,
            stable_only=stable_only,
            paths=paths or [],
            domains=domains or settings.domains,
        )

        blacklist = Blacklist()
        blacklist_path = config_path(blacklist_file, settings.blacklist_file, extractor, "fixes.blacklist")
        if blacklist_path is not None:
            blacklist = Blacklist.load(blacklist_path)

        path_blacklist = PathBlacklist()
        path_blacklist_path = config_path(
            path_blacklist_file, settings.path_blacklist_file, extractor, "fixes.pathblacklist"
        )
        if path_blacklist_path is not None:
            path_blacklist = PathBlacklist.load(path_blacklist_path)

        session = FixesSession(
            extractor,
            KnownCommitIndex.load(database),
            options,
            blacklist=blacklist,
            path_blacklist=path_blacklist,
        )
        results = session.walk()

        print_lines(format_machine(results) if machine else format_report(results))

        if stats:
            console.print(session.stats_line())

    except (RepositoryError, typer.BadParameter, ValidationError, SettingsError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def who(
    params: List[str] = typer.Argument(..., help="Revisions or paths to look up"),
    path_map_file: Optional[Path] = typer.Option(None, "--path-map", "-p", help="File containing the path-map data"),
    repo_path: Path = typer.Option(Path("."), "--repo", "-r", help="Path to Git repository"),
    ignore: Optional[List[str]] = typer.Option(
        None, "--ignore", "-i", help="Email address to ignore (if possible), or a file listing them"
    ),
    database: Optional[str] = typer.Option(
        None, "--database", "-d", help="Select database (git config fixes.<name>.pathmap and fixes.<name>.ignore)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Show who contributed to the paths touched by revisions or named directly."""
    try:
        settings = Settings()
        extractor = open_repository(repo_path, settings, verbose)
        options = WhoOptions(params=params, ignore=ignore or [], database=database)

        if options.database:
            if path_map_file is None:
                value = extractor.config_value(f"fixes.{options.database}.pathmap")
                if value:
                    path_map_file = expand_home(value)
            value = extractor.config_value(f"fixes.{options.database}.ignore")
            if value:
                options.ignore.append(str(expand_home(value)))

        if path_map_file is None:
            path_map_file = settings.path_map_file
        if path_map_file is None:
            raise typer.BadParameter("No path-map file given (--path-map or --database)")

        try:
            path_map = PathMap.load(path_map_file)
        except OSError as e:
            raise typer.BadParameter(f"Can't open path-map file: {path_map_file}") from e

        query = OwnershipQuery(extractor, path_map)
        for person in query.run(options.params, ignore=load_ignore(options.ignore)):
            console.print(f"{escape(person.name)} ({person.count})")

    except (RepositoryError, typer.BadParameter, ValidationError, SettingsError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def series(
    revision: str = typer.Argument(..., help="Revision holding the patch series"),
    repo_path: Path = typer.Option(Path("."), "--repo", "-r", help="Path to git repository"),
    output: Optional[Path] = typer.Option(None, "--file", "-f", help="Write output to specified file"),
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Show only commits not in given base version"),
    append: bool = typer.Option(False, "--append", help="Open output file in append mode"),
    stdout: bool = typer.Option(False, "--stdout", "-c", help="Write output to stdout"),
    domains: Optional[List[str]] = typer.Option(None, "--domain", help="Email domain whose signers own the patch"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Build a known-commit database from the patch series in a revision."""
    try:
        settings = Settings()
        extractor = open_repository(repo_path, settings, verbose)

        scanner = SeriesScanner(extractor, domains or settings.domains)
        if base:
            entries = scanner.scan_new(revision, base)
        else:
            entries = scanner.scan(revision)

        if stdout:
            print_lines([entry.to_line() for entry in entries.values()])
            return

        if output is None:
            output = Path(default_output_name(revision))

        count = write_entries(entries.values(), output, append=append)
        console.print(f"[bold green]✓[/bold green] Wrote {count} commits to {escape(str(output))}")

    except (RepositoryError, ValueError, SettingsError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from gitfixes import __version__

    console.print(f"[bold]GitFixes[/bold] version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
