"""repopulse CLI — Typer application with scan, context, and init commands."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from repopulse import __version__

app = typer.Typer(
    name="repopulse",
    help="Branch, commit and ticket activity across your repositories.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _parse_date(value: Optional[str], flag: str) -> Optional[datetime]:
    """Parse an ISO date/datetime option, exit 2 on failure."""
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        console.print(f"[bold red]Invalid {flag} date:[/bold red] {value}")
        raise typer.Exit(code=2) from exc


def _load_config(config: Optional[str]):
    from repopulse.config.loader import ConfigError, load_config

    try:
        return load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


# ── scan ──────────────────────────────────────────────────────────────────────


@app.command()
def scan(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to repopulse.toml"),
    repo: Optional[Path] = typer.Option(None, "--repo", help="Scan a single repository (no config)"),
    name: str = typer.Option("adhoc", "--name", help="Name for --repo"),
    since: Optional[str] = typer.Option(None, "--since", help="ISO date; default: 24h ago"),
    until: Optional[str] = typer.Option(None, "--until", help="ISO date upper bound"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON report to file"),
    by_member: bool = typer.Option(False, "--by-member", help="Group activity by team member"),
    diffs: bool = typer.Option(False, "--diffs", help="Show diffs of the 3 latest commits"),
    no_fetch: bool = typer.Option(False, "--no-fetch", help="Skip git fetch --all --prune"),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 if any repository reported errors"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Scan configured repositories (or one --repo) for branches and commits."""
    from repopulse.activity.authors import group_by_team_member
    from repopulse.config.schema import RepoConfig, RepoPulseConfig
    from repopulse.git.adapter import Git
    from repopulse.git.gateway import SubprocessGateway
    from repopulse.log import configure_logging
    from repopulse.output import json_report, terminal
    from repopulse.scanner.commits import get_commit_diffs
    from repopulse.scanner.engine import scan_all_repos

    if repo is not None:
        cfg = RepoPulseConfig(repos=[RepoConfig(name=name, path=repo.resolve())])
    else:
        cfg = _load_config(config)

    if format:
        if format not in ("terminal", "json"):
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]

    configure_logging("info" if verbose else cfg.logging.level, cfg.logging.json)

    since_dt = _parse_date(since, "--since")
    until_dt = _parse_date(until, "--until")
    if since_dt is None:
        since_dt = datetime.now(timezone.utc) - timedelta(hours=cfg.scan.since_hours)

    gateway = SubprocessGateway(timeout=cfg.scan.git_timeout)
    results = scan_all_repos(
        cfg.repos, since_dt, until_dt, gateway=gateway, fetch=cfg.scan.fetch and not no_fetch
    )

    if cfg.output.format == "json":
        print(json_report.render_scan(results))
    else:
        terminal.render_scan(
            results,
            show_commits=cfg.output.show_commits,
            max_commits=cfg.output.max_commits,
        )
        if by_member:
            if not cfg.team:
                console.print("[yellow]⚠[/yellow]  No [[team]] entries configured.")
            for result in results:
                terminal.render_team(
                    group_by_team_member(cfg.team, result.branches, result.commits)
                )
        if diffs:
            for result in results:
                latest = [c.sha for c in result.commits[:3]]
                git = Git(result.repo_path, gateway)
                for diff in get_commit_diffs(git, latest, max_lines=100):
                    console.print(f"\n[bold yellow]{diff.sha[:8]}[/bold yellow]")
                    console.print(diff.diff, markup=False, highlight=False)

    if output:
        Path(output).write_text(json_report.render_scan(results), encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")

    if strict and any(r.errors for r in results):
        raise typer.Exit(code=1)


# ── context ───────────────────────────────────────────────────────────────────


@app.command()
def context(
    branch: str = typer.Argument(..., help="Branch name on the remote, e.g. feature/PROJ-1-x"),
    repo: Path = typer.Option(Path("."), "--repo", help="Path to the local clone"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to repopulse.toml"),
    max_lines: Optional[int] = typer.Option(None, "--max-lines", help="Truncate the diff after N lines"),
    fetch: bool = typer.Option(False, "--fetch", help="git fetch --all --prune first"),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Resolve the base of BRANCH and show its aggregate diff."""
    from repopulse.config.schema import RepoPulseConfig
    from repopulse.context.diff import branch_diff_context
    from repopulse.git.adapter import Git, GitError
    from repopulse.git.gateway import SubprocessGateway
    from repopulse.log import configure_logging
    from repopulse.output import json_report, terminal

    if format not in ("terminal", "json"):
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)

    cfg = _load_config(config) if config else RepoPulseConfig()
    configure_logging("info" if verbose else cfg.logging.level, cfg.logging.json)

    gateway = SubprocessGateway(timeout=cfg.scan.git_timeout)
    git = Git(repo.resolve(), gateway)
    if not git.is_repo():
        console.print(f"[bold red]Error:[/bold red] not a git repository: {repo}")
        raise typer.Exit(code=2)
    if fetch:
        try:
            git.fetch_all()
        except GitError as exc:
            console.print(f"[bold red]Git error:[/bold red] {exc}")
            raise typer.Exit(code=2) from exc

    ctx = branch_diff_context(
        git.path,
        branch,
        max_lines or cfg.context.max_diff_lines,
        gateway,
        fallback_base=cfg.context.fallback_base,
        remote=cfg.context.remote,
    )

    if format == "json":
        print(json_report.render_context(ctx))
    else:
        terminal.render_context(ctx)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter repopulse.toml in the current directory."""
    from repopulse.config.defaults import CONFIG_FILENAME, DEFAULT_TOML

    config_path = Path.cwd() / CONFIG_FILENAME
    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"repopulse {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """repopulse — branch, commit and ticket activity across your repositories."""
