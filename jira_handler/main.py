"""sensu-jira-handler CLI — turn one Sensu event on stdin into one Jira issue."""

import sys
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from jira_handler.errors import HandlerError
from jira_handler.models import TicketFields, parse_event
from jira_handler.providers.jira import JiraProvider
from jira_handler.settings import HandlerSettings, annotation_overrides, resolve_settings
from jira_handler.templates import render_ticket_fields

EXIT_FAILURE = 2

app = typer.Typer(help="The Sensu Go jira handler", add_completion=False)

err_console = Console(stderr=True)


def _show_ticket(settings: HandlerSettings, fields: TicketFields) -> None:
    table = Table(title="Jira issue")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("URL", Text(settings.url))
    table.add_row("Project", Text(fields.project))
    table.add_row("Issue type", Text(fields.issue_type))
    table.add_row("Summary", Text(fields.summary))
    table.add_row("Description", Text(fields.description))

    err_console.print(table)


def handle(args: dict[str, object | None], raw_event: str, verbose: bool = False) -> None:
    """Parse the event, resolve settings, render and submit. Raises HandlerError on any failure."""
    event = parse_event(raw_event)
    settings = resolve_settings(args, annotation_overrides(event))
    fields = render_ticket_fields(settings, event)

    if verbose:
        _show_ticket(settings, fields)

    provider = JiraProvider(settings)
    provider.create_issue(fields)


@app.command()
def main(
    jira_url: Annotated[str | None, typer.Option("--jira-url", help="The jira URL")] = None,
    jira_user: Annotated[str | None, typer.Option("--jira-user", help="The jira user")] = None,
    jira_password: Annotated[str | None, typer.Option("--jira-password", help="The jira password")] = None,
    jira_project: Annotated[
        str | None,
        typer.Option("--jira-project", help="The jira project key (template)"),
    ] = None,
    jira_issue_type: Annotated[
        str | None,
        typer.Option("--jira-issue-type", help="The jira issue type (template)"),
    ] = None,
    jira_summary: Annotated[
        str | None,
        typer.Option("--jira-summary", help="The template to use to populate the issue summary"),
    ] = None,
    jira_description: Annotated[
        str | None,
        typer.Option("--jira-description", help="The template to use to populate the issue description"),
    ] = None,
    jira_timeout: Annotated[
        float | None,
        typer.Option("--jira-timeout", help="Seconds to wait for Jira before giving up (default 30)"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Print the rendered issue to stderr before submitting")
    ] = False,
) -> None:
    """Read a Sensu event from stdin and create a Jira issue for it."""
    args: dict[str, object | None] = {
        "url": jira_url,
        "user": jira_user,
        "password": jira_password,
        "project": jira_project,
        "issue_type": jira_issue_type,
        "summary": jira_summary,
        "description": jira_description,
        "timeout": jira_timeout,
    }
    # Invalid UTF-8 in check output becomes U+FFFD instead of rejecting the event.
    raw_event = sys.stdin.buffer.read().decode("utf-8", errors="replace")

    try:
        handle(args, raw_event, verbose=verbose)
    except HandlerError as exc:
        # Plain echo: Jira error bodies can contain brackets that rich would eat as markup.
        typer.echo(str(exc))
        raise typer.Exit(EXIT_FAILURE) from exc
