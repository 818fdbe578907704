"""Rich terminal reporter — per-repo branch and commit tables."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from repopulse.activity.models import TeamActivity
from repopulse.context.models import BaseSource, BranchDiffContext
from repopulse.scanner.models import RepoScanResult

_SOURCE_STYLE = {
    BaseSource.PR: "bold green",
    BaseSource.FALLBACK: "bold yellow",
    BaseSource.NONE: "dim",
}


def _first_line(text: str) -> str:
    return text.split("\n", 1)[0]


def render_scan(
    results: Sequence[RepoScanResult],
    *,
    show_commits: bool = True,
    max_commits: int = 20,
    console: Optional[Console] = None,
) -> None:
    """Print scan results using Rich."""
    console = console or Console()

    for result in results:
        console.print()
        console.rule(f"[bold]{result.repo_name}[/bold] [dim]{result.repo_path}[/dim]")

        if result.branches:
            table = Table(title="Branches", title_style="bold", border_style="dim")
            table.add_column("Branch", style="cyan")
            table.add_column("Last activity", style="green")
            table.add_column("Author", style="magenta")
            table.add_column("Last message")
            for branch in result.branches:
                table.add_row(
                    branch.name,
                    branch.last_commit_date.strftime("%Y-%m-%d %H:%M"),
                    branch.last_commit_author_email,
                    branch.last_commit_message,
                )
            console.print(table)

        if show_commits and result.commits:
            table = Table(title="Commits", title_style="bold", border_style="dim")
            table.add_column("Sha", style="yellow")
            table.add_column("Date", style="green")
            table.add_column("Author", style="magenta")
            table.add_column("Branch", style="cyan")
            table.add_column("+/-", justify="right")
            table.add_column("Tickets")
            table.add_column("Message")
            for commit in result.commits[:max_commits]:
                table.add_row(
                    commit.short_sha,
                    commit.date.strftime("%Y-%m-%d %H:%M"),
                    commit.author_email,
                    commit.branch,
                    f"[green]+{commit.insertions}[/green] [red]-{commit.deletions}[/red]",
                    ", ".join(commit.ticket_keys),
                    _first_line(commit.message),
                )
            console.print(table)
            if len(result.commits) > max_commits:
                console.print(f"[dim]... and {len(result.commits) - max_commits} more[/dim]")

        for error in result.errors:
            console.print(f"[bold red]✗[/bold red] {error}")

        console.print(
            f"[dim]Branches:[/dim] {len(result.branches)}  "
            f"[dim]Commits:[/dim] {len(result.commits)}  "
            f"[dim]Errors:[/dim] {len(result.errors)}"
        )


def render_team(activities: Sequence[TeamActivity], console: Optional[Console] = None) -> None:
    console = console or Console()
    table = Table(title="By team member", title_style="bold", border_style="dim")
    table.add_column("Member", style="cyan")
    table.add_column("Active branches", justify="right")
    table.add_column("Commits", justify="right")
    table.add_column("Latest")
    for activity in activities:
        latest = _first_line(activity.commits[0].message) if activity.commits else "-"
        table.add_row(
            activity.member_name,
            str(len(activity.branches)),
            str(len(activity.commits)),
            latest,
        )
    console.print(table)


def render_context(context: BranchDiffContext, console: Optional[Console] = None) -> None:
    console = console or Console()
    style = _SOURCE_STYLE.get(context.base_source, "")
    base = context.base_branch or "none"
    console.print(
        f"[bold]{context.branch_name}[/bold] → [{style}]{base}[/{style}] "
        f"[dim]({context.base_source.value})[/dim]"
    )

    if context.aggregate_stat is None:
        console.print("[dim]No aggregate diff available.[/dim]")
        return

    console.print(Panel(context.aggregate_stat.rstrip() or "(no changes)", title="Diffstat"))
    if context.aggregate_diff:
        console.print(Syntax(context.aggregate_diff, "diff", word_wrap=True))
    if context.aggregate_diff_truncated:
        console.print("[yellow]⚠ Diff truncated.[/yellow]")
