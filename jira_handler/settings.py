"""Settings resolution: defaults < flags < event annotations < environment."""

from collections.abc import Mapping
from typing import NamedTuple

from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from jira_handler.errors import ConfigError
from jira_handler.models import Event

PLUGIN_NAME = "sensu-jira-handler"
KEYSPACE = f"github.com/akozlenkov/{PLUGIN_NAME}"
KEYSPACE_PREFIX = f"{KEYSPACE}/"
ANNOTATION_PREFIX = f"sensu.io/plugins/{PLUGIN_NAME}/config/"
# Later prefixes win when both forms sit on the same object.
ANNOTATION_PREFIXES = (KEYSPACE_PREFIX, ANNOTATION_PREFIX)

DEFAULT_SUMMARY = "Check {{ .Name }} fired with status {{ .Status }}"
DEFAULT_DESCRIPTION = "{{ .Output }}"
DEFAULT_TIMEOUT = 30.0


class HandlerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="JIRA_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    # Connection
    url: str = ""
    user: str = ""
    password: SecretStr = SecretStr("")
    timeout: float = DEFAULT_TIMEOUT  # seconds, per request

    # Templates, rendered against each event
    project: str = ""
    issue_type: str = ""
    summary: str = DEFAULT_SUMMARY
    description: str = DEFAULT_DESCRIPTION

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment outranks explicit flags.
        return env_settings, init_settings, dotenv_settings


class Option(NamedTuple):
    field: str
    flag: str
    env: str
    required: bool
    annotatable: bool  # may be overridden per check/entity


# Order matters: required options are validated top to bottom.
OPTIONS: tuple[Option, ...] = (
    Option("url", "jira-url", "JIRA_URL", required=True, annotatable=False),
    Option("user", "jira-user", "JIRA_USER", required=True, annotatable=False),
    Option("password", "jira-password", "JIRA_PASSWORD", required=True, annotatable=False),
    Option("project", "jira-project", "JIRA_PROJECT", required=True, annotatable=True),
    Option("issue_type", "jira-issue-type", "JIRA_ISSUE_TYPE", required=True, annotatable=True),
    Option("summary", "jira-summary", "JIRA_SUMMARY", required=False, annotatable=True),
    Option("description", "jira-description", "JIRA_DESCRIPTION", required=False, annotatable=True),
    Option("timeout", "jira-timeout", "JIRA_TIMEOUT", required=False, annotatable=False),
)


def annotation_overrides(event: Event) -> dict[str, str]:
    """Collect option overrides from entity and check annotations.

    Keys look like ``github.com/akozlenkov/sensu-jira-handler/jira-project``
    (the plugin keyspace) or ``sensu.io/plugins/sensu-jira-handler/config/jira-project``.
    Check annotations win over entity annotations; on the same object the
    ``sensu.io`` form wins. Credentials and the URL cannot be overridden this way.
    """
    by_flag = {opt.flag: opt.field for opt in OPTIONS if opt.annotatable}
    overrides: dict[str, str] = {}
    sources = [
        event.entity.metadata.annotations if event.entity else {},
        event.check.metadata.annotations if event.check else {},
    ]
    for annotations in sources:
        for prefix in ANNOTATION_PREFIXES:
            for key, value in annotations.items():
                if not key.startswith(prefix) or not value:
                    continue
                field = by_flag.get(key.removeprefix(prefix))
                if field:
                    overrides[field] = value
    return overrides


def _value(settings: HandlerSettings, field: str) -> str:
    val = getattr(settings, field)
    if isinstance(val, SecretStr):
        return val.get_secret_value()
    return str(val)


def resolve_settings(
    args: Mapping[str, object | None],
    annotations: Mapping[str, str] | None = None,
) -> HandlerSettings:
    """Merge flags, annotations and environment into a validated HandlerSettings.

    ``args`` maps field names to flag values; ``None`` means the flag was not
    given. Environment variables set to a non-empty value always win.

    Raises ConfigError naming the first missing required option.
    """
    overrides: dict[str, object] = {k: v for k, v in args.items() if v is not None}
    overrides.update(annotations or {})

    try:
        settings = HandlerSettings(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc

    for opt in OPTIONS:
        if opt.required and not _value(settings, opt.field):
            raise ConfigError(f"--{opt.flag} or {opt.env} environment variable is required")

    if settings.timeout <= 0:
        raise ConfigError("--jira-timeout or JIRA_TIMEOUT must be a positive number of seconds")

    return settings
