"""Shared pydantic models — the Sensu event as read from stdin, and the ticket sent to Jira."""

from pydantic import BaseModel, ConfigDict, ValidationError

from jira_handler.errors import EventError


class ObjectMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    namespace: str = ""
    annotations: dict[str, str] = {}


class Entity(BaseModel):
    model_config = ConfigDict(frozen=True)

    metadata: ObjectMeta = ObjectMeta()


class Check(BaseModel):
    model_config = ConfigDict(frozen=True)

    metadata: ObjectMeta = ObjectMeta()
    status: int = 0  # 0 OK, 1 WARNING, 2 CRITICAL, anything else UNKNOWN
    output: str = ""
    command: str = ""
    state: str = ""  # "passing" | "failing" | "flapping"
    interval: int = 0
    occurrences: int = 0
    issued: int = 0
    executed: int = 0
    duration: float = 0.0

    @property
    def name(self) -> str:
        return self.metadata.name


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    entity: Entity | None = None
    check: Check | None = None


class TicketFields(BaseModel):
    """The four rendered strings that make up one create-issue request."""

    model_config = ConfigDict(frozen=True)

    project: str
    issue_type: str
    summary: str
    description: str


class CreatedIssue(BaseModel):
    """Jira's acknowledgment for a created issue."""

    model_config = ConfigDict(frozen=True)

    id: str
    key: str
    url: str  # REST "self" link


def parse_event(raw: str) -> Event:
    """Parse a Sensu event from JSON text.

    Events without a check or an entity are rejected, as the Sensu plugin SDK
    does before a handler ever runs.
    """
    if not raw.strip():
        raise EventError("failed to read event: stdin is empty")
    try:
        event = Event.model_validate_json(raw)
    except ValidationError as exc:
        raise EventError(f"failed to unmarshal event: {exc}") from exc
    if event.check is None:
        raise EventError("event does not contain a check")
    if event.entity is None:
        raise EventError("event does not contain an entity")
    return event
