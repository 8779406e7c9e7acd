"""Handler error types. main.py turns any of these into exit status 2."""


class HandlerError(RuntimeError):
    pass


class EventError(HandlerError):
    """The event on stdin could not be read or is incomplete."""


class ConfigError(HandlerError):
    """A required option is missing or an option value is invalid."""


class TemplateError(HandlerError):
    """A template failed to parse or referenced an unknown field."""


class SubmissionError(HandlerError):
    """The Jira client could not be built or Jira rejected the request."""
