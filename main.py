#!/usr/bin/env python3

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from src.core.application import ApplicationStatus
from src.pipeline.dashboard import PipelineDashboard
from src.pipeline.views import STATUS_TABS, SortKey, ViewCriteria
from src.remote.base_remote import RemoteError
from src.remote.http_remote import HttpRemote
from src.utils.config import get_settings
from src.utils.logger import memory_handler

app = typer.Typer(name="hireflow", add_completion=False)
console = Console()


async def _with_dashboard(action):
    """Load the pipeline, run ``action(dashboard)`` and close the remote"""
    remote = HttpRemote()
    try:
        dashboard = PipelineDashboard(remote)
        await dashboard.load()
        return await action(dashboard)
    finally:
        await remote.close()


def _run(action):
    try:
        return asyncio.run(_with_dashboard(action))
    except RemoteError as e:
        console.print(f"[red]❌ Backend error:[/red] {e.message or e}")
        raise typer.Exit(1)


@app.command()
def status():
    """Show configuration and per-job pipeline counts"""
    settings = get_settings()

    config_table = Table(title="Configuration Status")
    config_table.add_column("Item", style="cyan")
    config_table.add_column("Status", style="green")
    config_table.add_row("API URL", settings.api_url)
    config_table.add_row("API Token", "✅ Configured" if settings.api_token else "❌ Not set")
    config_table.add_row("Export directory", str(settings.get_export_dir()))
    console.print(config_table)

    async def action(dashboard: PipelineDashboard):
        return dashboard.summary()

    rows = _run(action)

    table = Table(title="Pipeline")
    for column in ("Job", "Title", "Total", "Pending", "Interviewed", "Hired", "Rejected", "Interviews"):
        table.add_column(column)
    for row in rows:
        table.add_row(
            row["job_id"], row["title"], str(row["total"]), str(row["pending"]),
            str(row["interviewed"]), str(row["hired"]), str(row["rejected"]), str(row["interviews"]),
        )
    console.print(table)

    warnings = memory_handler.get_logs(10, min_level=logging.WARNING)
    if warnings:
        console.print("[yellow]Recent warnings:[/yellow]")
        for line in warnings:
            console.print(f"  {line}", markup=False)


@app.command()
def applications(
    job: Optional[str] = typer.Option(None, "--job", "-j", help="Job id (default: all jobs)"),
    tab: str = typer.Option("All", "--tab", "-t", help=f"One of: {', '.join(STATUS_TABS)}"),
    search: str = typer.Option("", "--search", "-s", help="Match job title, name or email"),
    sort: Optional[SortKey] = typer.Option(None, "--sort", help="Sort order"),
    more: int = typer.Option(0, "--more", help="Extra pages to reveal"),
):
    """List the visible applications"""

    async def action(dashboard: PipelineDashboard):
        dashboard.set_criteria(ViewCriteria(status_tab=tab, search_term=search, sort_key=sort, job_id=job))
        for _ in range(more):
            dashboard.grow()
        return dashboard.visible_applications(), len(dashboard.filtered())

    shown, total = _run(action)

    table = Table(title=f"Applications ({len(shown)} of {total})")
    table.add_column("ID", style="dim")
    table.add_column("Applicant", style="cyan")
    table.add_column("Email")
    table.add_column("Job")
    table.add_column("Status", style="green")
    for application in shown:
        row = application.to_summary()
        table.add_row(row["id"], row["applicant"], row["email"], row["job_title"], row["status"])
    console.print(table)


@app.command("set-status")
def set_status(
    application_id: str = typer.Argument(..., help="Application id"),
    new_status: ApplicationStatus = typer.Argument(..., help="New status"),
    job: Optional[str] = typer.Option(None, "--job", "-j", help="Job id hint"),
):
    """Update one application's status"""

    async def action(dashboard: PipelineDashboard):
        return await dashboard.update_status(application_id, new_status, job)

    result = _run(action)
    if result.ok:
        console.print(f"[green]✅ {result.message}[/green]")
    else:
        console.print(f"[red]❌ {result.error.value}: {result.message}[/red]")
        raise typer.Exit(1)


@app.command()
def export(
    job: str = typer.Option("all", "--job", "-j", help="Job id or 'all'"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output directory"),
):
    """Export applications to CSV"""

    async def action(dashboard: PipelineDashboard):
        return dashboard.export(job, out)

    path = _run(action)
    if path is None:
        console.print("[yellow]⚠️ No applications to export[/yellow]")
        raise typer.Exit(1)
    console.print(f"✅ Exported to [cyan]{path}[/cyan]")


if __name__ == "__main__":
    app()
