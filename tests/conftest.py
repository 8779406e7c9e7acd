"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from jira_handler.models import Event, parse_event
from jira_handler.settings import OPTIONS

EVENT = {
    "timestamp": 1700000000,
    "entity": {
        "entity_class": "agent",
        "metadata": {"name": "web-01", "namespace": "default"},
    },
    "check": {
        "metadata": {"name": "disk-check", "namespace": "default"},
        "command": "check-disk-usage -w 80 -c 90",
        "status": 2,
        "output": "disk usage 95%",
        "state": "failing",
        "interval": 60,
        "occurrences": 3,
        "issued": 1700000000,
        "executed": 1700000001,
        "duration": 0.25,
    },
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep JIRA_* variables and any .env file from the developer's checkout out of every test."""
    monkeypatch.chdir(tmp_path)
    for opt in OPTIONS:
        monkeypatch.delenv(opt.env, raising=False)


@pytest.fixture
def event_json() -> str:
    return json.dumps(EVENT)


@pytest.fixture
def event(event_json: str) -> Event:
    return parse_event(event_json)


@pytest.fixture
def flags() -> dict[str, object | None]:
    return {
        "url": "https://jira.example.com",
        "user": "sensu",
        "password": "s3cret",
        "project": "OPS",
        "issue_type": "Bug",
        "summary": None,
        "description": None,
        "timeout": None,
    }
