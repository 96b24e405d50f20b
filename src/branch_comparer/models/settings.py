"""Persisted user settings."""

from typing import Optional

from pydantic import BaseModel, field_validator

DEFAULT_PULL_REQUEST_URI_TEMPLATE = "https://dev.azure.com/pullrequest/{id}"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate_pull_request_uri_template(template: str) -> str:
    """Check that a template formats with only an '{id}' field."""
    if "{id}" not in template:
        raise ValueError("template must contain an '{id}' placeholder")
    try:
        template.format(id=0)
    except (KeyError, IndexError, ValueError) as e:
        raise ValueError(f"template is not a valid URL template: {e}") from e
    return template


class ComparerSettings(BaseModel):
    """Settings remembered between runs."""

    repository_path: str = "."
    pull_request_uri_template: str = DEFAULT_PULL_REQUEST_URI_TEMPLATE
    include_remote_branches: bool = False
    source_branch: Optional[str] = None
    target_branch: Optional[str] = None
    compare_limit: int = 50
    log_level: str = "WARNING"

    @field_validator("pull_request_uri_template")
    @classmethod
    def _template_has_id(cls, value: str) -> str:
        return validate_pull_request_uri_template(value)

    @field_validator("compare_limit")
    @classmethod
    def _positive_limit(cls, value: int) -> int:
        if value < 1:
            raise ValueError("compare_limit must be at least 1")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level
