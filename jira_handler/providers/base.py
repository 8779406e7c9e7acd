"""Abstract base class for ticket providers."""

from abc import ABC, abstractmethod

from jira_handler.models import CreatedIssue, TicketFields


class TicketProvider(ABC):
    @abstractmethod
    def create_issue(self, fields: TicketFields) -> CreatedIssue: ...
