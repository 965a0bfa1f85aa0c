import logging
import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gendoc.core.errors import ConfigError

LOG_LEVEL_ENV = "GENDOC_LOG_LEVEL"
DEFAULT_OUTPUT = "docs.md"
DEFAULT_LOG_LEVEL = "WARNING"

OutputFormat = Literal["markdown", "tree"]


class PluginConfig(BaseModel):
    """Settings passed to the plugin through ``--gendoc_out=<parameter>:<dir>``."""

    model_config = ConfigDict(extra="forbid")

    output: str = Field(default=DEFAULT_OUTPUT, description="Name of the rendered documentation file")
    format: OutputFormat = Field(default="markdown", description="Documentation format")
    diagnostics: str | None = Field(
        default=None,
        description="When set, also emit the resolution log as a file with this name",
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level name")

    @field_validator("output")
    @classmethod
    def validate_output(cls, v: str) -> str:
        if not v or v.startswith("/"):
            msg = "output must be a non-empty relative file name"
            raise ValueError(msg)
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level '{v}'"
            raise ValueError(msg)
        return level

    @property
    def level(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level]


def parse_parameter(parameter: str) -> dict[str, str]:
    """Split a protoc parameter string of the form ``key=value,key=value``."""
    values: dict[str, str] = {}
    for item in parameter.split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigError(f"Invalid plugin parameter '{item}', expected key=value")
        values[key] = value.strip()
    return values


def make_config(values: Mapping[str, object]) -> PluginConfig:
    try:
        return PluginConfig.model_validate(dict(values))
    except ValidationError as e:
        msg = f"Invalid gendoc settings: {e}"
        raise ConfigError(msg) from e


def load_config(parameter: str = "", environ: Mapping[str, str] | None = None) -> PluginConfig:
    """Build the plugin settings from the protoc parameter string and the environment.

    Parameter values take precedence over ``GENDOC_LOG_LEVEL``.
    """
    environ = os.environ if environ is None else environ

    data: dict[str, str] = {}
    env_level = environ.get(LOG_LEVEL_ENV)
    if env_level:
        data["log_level"] = env_level
    data.update(parse_parameter(parameter))
    return make_config(data)
