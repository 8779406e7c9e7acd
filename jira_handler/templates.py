"""Render ticket fields from `{{ .Field }}` templates against a Sensu event."""

import re
from collections.abc import Callable

from jira_handler.errors import TemplateError
from jira_handler.models import Event, TicketFields
from jira_handler.settings import HandlerSettings

_ACTION = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
_REFERENCE = re.compile(r"^\.?([A-Za-z_][A-Za-z0-9_]*)$")

STATUS_LABELS = {0: "OK", 1: "WARNING", 2: "CRITICAL"}


def status_label(status: int) -> str:
    return STATUS_LABELS.get(status, "UNKNOWN")


# Field name (lowercase) -> accessor. Anything not listed here fails the render.
FIELDS: dict[str, Callable[[Event], object]] = {
    "name": lambda e: e.check.name if e.check else "",
    "namespace": lambda e: e.check.metadata.namespace if e.check else "",
    "status": lambda e: e.check.status if e.check else 0,
    "statuslabel": lambda e: status_label(e.check.status if e.check else 0),
    "output": lambda e: e.check.output if e.check else "",
    "command": lambda e: e.check.command if e.check else "",
    "state": lambda e: e.check.state if e.check else "",
    "interval": lambda e: e.check.interval if e.check else 0,
    "occurrences": lambda e: e.check.occurrences if e.check else 0,
    "issued": lambda e: e.check.issued if e.check else 0,
    "executed": lambda e: e.check.executed if e.check else 0,
    "duration": lambda e: e.check.duration if e.check else 0.0,
    "entity": lambda e: e.entity.metadata.name if e.entity else "",
}


def _lookup(name: str, reference: str, event: Event) -> str:
    accessor = FIELDS.get(reference.lower())
    if accessor is None:
        raise TemplateError(f'template "{name}": unknown field "{reference}"')
    return str(accessor(event))


def render(name: str, template: str, event: Event) -> str:
    """Substitute every `{{ .Field }}` reference in template.

    The leading dot and inner whitespace are optional; field names are
    case-insensitive. Unclosed actions, anything other than a bare field
    reference, and unknown fields raise TemplateError.
    """
    parts: list[str] = []
    pos = 0
    for match in _ACTION.finditer(template):
        literal = template[pos : match.start()]
        if "{{" in literal:
            raise TemplateError(f'template "{name}": unclosed action')
        parts.append(literal)

        inner = match.group(1).strip()
        ref = _REFERENCE.match(inner)
        if not ref:
            raise TemplateError(f'template "{name}": unsupported action "{{{{{match.group(1)}}}}}"')
        parts.append(_lookup(name, ref.group(1), event))
        pos = match.end()

    tail = template[pos:]
    if "{{" in tail:
        raise TemplateError(f'template "{name}": unclosed action')
    parts.append(tail)
    return "".join(parts)


def render_ticket_fields(settings: HandlerSettings, event: Event) -> TicketFields:
    """Render project, issue type, summary and description, stopping at the first failure."""
    project = render("project", settings.project, event)
    issue_type = render("issueType", settings.issue_type, event)
    summary = render("summary", settings.summary, event)
    description = render("description", settings.description, event)
    return TicketFields(
        project=project,
        issue_type=issue_type,
        summary=summary,
        description=description,
    )
