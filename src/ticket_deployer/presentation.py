"""Terminal rendering of repositories, tickets, artifacts and outcomes."""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from .models import AnnotationStatus, Artifact, DeploymentRequest, RepositoryDescriptor, Ticket
from .orchestrator import (
    DeploymentOutcome,
    DeploymentState,
    Deploying,
    Listing,
    Succeeded,
)


class DeployPresenter:
    """Renders deploy-view state changes and results to a rich console."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def on_state_change(self, state: DeploymentState) -> None:
        if isinstance(state, Listing):
            self.console.print("[dim]Loading repositories...[/dim]")
        elif isinstance(state, Deploying):
            self.console.print("\n[bold]Deployment Progress[/bold]")
            self.console.print("  ✓ Preparing code for deployment")
            self.console.print(f"  ⟳ Pushing to repository [cyan]{escape(state.request.repository)}[/cyan]")
        elif isinstance(state, Succeeded) and state.annotation.status == AnnotationStatus.UPDATING:
            self.console.print("  ⟳ Updating ticket with commit information")

    def repositories(self, repositories: List[RepositoryDescriptor], error: Optional[str] = None) -> None:
        if error:
            self.error_banner("Error Loading Repositories", error)
            return
        if not repositories:
            self.console.print("No repositories found. Please refresh or check your repository connection.")
            return
        table = Table(title=f"Found {len(repositories)} repositories")
        table.add_column("#", justify="right")
        table.add_column("Repository", style="bold")
        table.add_column("Description")
        table.add_column("Visibility")
        for i, repo in enumerate(repositories, 1):
            table.add_row(
                str(i),
                escape(repo.name),
                escape(repo.description),
                "[yellow]Private[/yellow]" if repo.is_private else "Public",
            )
        self.console.print(table)

    def tickets(self, tickets: List[Ticket]) -> None:
        if not tickets:
            self.console.print("No tickets match.")
            return
        table = Table(title=f"{len(tickets)} tickets")
        table.add_column("ID", style="bold")
        table.add_column("Title")
        table.add_column("Status")
        table.add_column("Priority")
        table.add_column("Type")
        status_styles = {"Done": "green", "In Progress": "yellow"}
        for ticket in tickets:
            style = status_styles.get(ticket.status, "dim")
            table.add_row(
                escape(ticket.id),
                escape(ticket.title),
                f"[{style}]{escape(ticket.status or '-')}[/{style}]",
                escape(ticket.priority or "-"),
                escape(ticket.type or "-"),
            )
        self.console.print(table)

    def artifact(self, artifact: Artifact) -> None:
        label = artifact.origin_id or "generated"
        title = f"{label}-code.{artifact.extension}"
        if artifact.origin_title:
            title += f" - {artifact.origin_title}"
        self.console.print(
            Panel(
                Syntax(artifact.content, artifact.extension, line_numbers=True, word_wrap=True),
                title=escape(title),
                subtitle=f"{len(artifact.content)} characters",
            )
        )

    def nothing_to_deploy(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")
        self.console.print("Run [bold]ticket-deployer generate TICKET_ID[/bold] or "
                           "[bold]ticket-deployer stage FILE[/bold] first.")

    def preview(self, request: DeploymentRequest, artifact: Artifact) -> None:
        lines = [
            "[dim]# Deployment Summary[/dim]",
            f"[green]Repository: {escape(request.repository)}[/green]",
            f"[blue]Branch: {escape(request.branch)}[/blue]",
            f"[yellow]File: {escape(request.file_path)}[/yellow]",
            f"[magenta]Message: {escape(request.commit_message)}[/magenta]",
            f"[dim]Code size: {len(artifact.content)} characters[/dim]",
        ]
        if artifact.origin_id:
            lines.append(f"[orange3]Ticket: {escape(artifact.origin_id)}[/orange3]")
        self.console.print(Panel("\n".join(lines), title="Deployment Preview"))

    def validation_error(self, field: str, message: str) -> None:
        self.console.print(f"[red]✗ {escape(field)}: {escape(message)}[/red]")

    def error_banner(self, title: str, message: str) -> None:
        self.console.print(Panel(f"[red]{escape(message)}[/red]", title=f"[bold red]{title}[/bold red]",
                                 border_style="red"))

    def outcome(
        self,
        outcome: DeploymentOutcome,
        request: DeploymentRequest,
        origin_id: Optional[str] = None,
    ) -> None:
        if not outcome.succeeded:
            self.error_banner("Deployment Failed", outcome.error_message or "Failed to deploy code.")
            return

        result = outcome.transfer_result
        lines = [
            f"Repository: [bold]{escape(request.repository)}[/bold]",
            f"Branch: [bold]{escape(request.branch)}[/bold]",
            f"File: [bold]{escape(request.file_path)}[/bold]",
        ]
        if result and result.commit_sha:
            commit = result.short_sha or "View"
            if result.commit_url:
                commit += f" ({escape(result.commit_url)})"
            lines.append(f"Commit: [bold]{commit}[/bold]")
        if result and (result.size is not None or result.encoding):
            lines.append(f"Size: {result.size or 0} bytes")
            lines.append(f"Encoding: {escape(result.encoding or 'base64')}")

        if origin_id:
            lines.append("")
            lines.append(self._annotation_line(outcome, origin_id))

        self.console.print(
            Panel(
                "\n".join(lines),
                title="[bold green]Deployment Successful![/bold green]",
                border_style="green",
            )
        )

    def _annotation_line(self, outcome: DeploymentOutcome, origin_id: str) -> str:
        ticket = escape(origin_id)
        status = outcome.annotation_status
        if status == AnnotationStatus.UPDATING:
            return f"[blue]Updating ticket {ticket}...[/blue]"
        if status == AnnotationStatus.ANNOTATED:
            return f"[green]Successfully updated ticket {ticket} with commit information[/green]"
        if status == AnnotationStatus.FAILED:
            reason = f": {escape(outcome.annotation_reason)}" if outcome.annotation_reason else ""
            return f"[yellow]Deployment successful, but failed to update ticket {ticket}{reason}[/yellow]"
        return "[dim]No ticket update required[/dim]"
