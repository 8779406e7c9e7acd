"""Jira REST API v2 provider."""

import httpx

from jira_handler.errors import SubmissionError
from jira_handler.models import CreatedIssue, TicketFields
from jira_handler.providers.base import TicketProvider
from jira_handler.settings import HandlerSettings

CREATE_ISSUE_PATH = "/rest/api/2/issue"


def _base_url(raw: str) -> str:
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise SubmissionError(f"invalid Jira URL '{raw}': {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise SubmissionError(f"invalid Jira URL '{raw}': expected http(s)://host[/path]")
    return raw.rstrip("/")


def _error_detail(response: httpx.Response) -> str:
    """Flatten Jira's {"errorMessages": [...], "errors": {...}} body into one line."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return f"{response.status_code} {response.reason_phrase}"

    messages = [str(m) for m in body.get("errorMessages") or []]
    messages += [f"{field}: {msg}" for field, msg in (body.get("errors") or {}).items()]
    if not messages:
        return f"{response.status_code} {response.reason_phrase}"
    return f"{response.status_code} {'; '.join(messages)}"


class JiraProvider(TicketProvider):
    def __init__(self, settings: HandlerSettings) -> None:
        self._base = _base_url(settings.url)
        self._auth = httpx.BasicAuth(settings.user, settings.password.get_secret_value())
        self._timeout = settings.timeout

    def _post(self, path: str, body: dict) -> dict:
        try:
            response = httpx.post(
                f"{self._base}{path}",
                json=body,
                auth=self._auth,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise SubmissionError(f"unable to reach Jira at {self._base}: {exc}") from exc

        if response.status_code in (401, 403):
            raise SubmissionError(
                f"Jira returned {response.status_code}. Check --jira-user/JIRA_USER and --jira-password/JIRA_PASSWORD."
            )
        if response.is_error:
            raise SubmissionError(f"unable to create Jira issue: {_error_detail(response)}")
        try:
            node = response.json()
        except ValueError as exc:
            raise SubmissionError(f"unexpected response from Jira: {response.text[:200]!r}") from exc
        if not isinstance(node, dict):
            raise SubmissionError(f"unexpected response from Jira: {response.text[:200]!r}")
        return node

    def create_issue(self, fields: TicketFields) -> CreatedIssue:
        node = self._post(
            CREATE_ISSUE_PATH,
            {
                "fields": {
                    "project": {"key": fields.project},
                    "issuetype": {"name": fields.issue_type},
                    "summary": fields.summary,
                    "description": fields.description,
                }
            },
        )
        return CreatedIssue(
            id=str(node.get("id") or ""),
            key=str(node.get("key") or ""),
            url=str(node.get("self") or ""),
        )
