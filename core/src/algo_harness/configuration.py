from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from algo_harness.errors import ConfigError
from algo_harness.inputs.codec import NO_CHARACTER, to_char
from algo_harness.inputs.settings import FileParsingConfig

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


class RunParameters(BaseModel):
    """Everything an operator can set for one run, from the command line or a YAML file."""

    model_config = ConfigDict(extra="forbid")

    algorithm: str = Field(min_length=1)
    input_key: str = Field(min_length=1)
    inputs: list[str] = Field(min_length=1)
    algorithm_config: list[str] = Field(default_factory=list)
    output: str = "file"

    # File parsing, as raw tokens; decoded by file_parsing_config()
    separator: str | None = ";"
    quote: str | None = '"'
    escape: str | None = NO_CHARACTER
    skip_lines: int = Field(default=0, ge=0)
    strict_quotes: bool = False
    ignore_leading_spaces: bool = False
    header: bool = False
    skip_differing_lines: bool = False
    null_string: str = ""

    db_connection: str | None = None
    db_type: str | None = None

    temp_dir: str | None = None
    clear_temp: bool = True
    results_dir: str | None = None

    experiment: str | None = None
    experiment_tags: list[str] = Field(default_factory=list)
    experiment_config: list[str] = Field(default_factory=list)
    tracking_uri: str | None = None

    log_level: str = "INFO"

    @field_validator("algorithm_config", "experiment_config")
    @classmethod
    def _require_key_value(cls, value: list[str]) -> list[str]:
        for item in value:
            key, sep, _ = item.partition(":")
            if not sep or not key:
                raise ValueError(f"{item!r} must look like <name>:<value>")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return normalized

    def file_parsing_config(self) -> FileParsingConfig:
        """Decode delimiter tokens; raises IllegalCharacterError for unknown tokens."""
        return FileParsingConfig(
            separator=to_char(self.separator),
            quote=to_char(self.quote),
            escape=to_char(self.escape),
            skip_lines=self.skip_lines,
            strict_quotes=self.strict_quotes,
            ignore_leading_whitespace=self.ignore_leading_spaces,
            header=self.header,
            skip_differing_lines=self.skip_differing_lines,
            null_string=self.null_string,
        )

    def telemetry_configuration(self) -> dict[str, str]:
        """Key/value pairs recorded with the experiment: algorithm config plus extra config."""
        pairs: dict[str, str] = {"algorithm": self.algorithm, "output": self.output}
        for item in [*self.algorithm_config, *self.experiment_config]:
            key, _, value = item.partition(":")
            pairs[key] = value
        return pairs


def load_yaml(path: str | Path) -> dict[str, Any]:
    try:
        with Path(path).open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
    except OSError as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"YAML root must be a mapping: {path}")
    return payload


def resolve_env_vars(payload: Any) -> Any:
    return _resolve_env_vars(payload, path="$")


def _resolve_env_vars(payload: Any, *, path: str) -> Any:
    if isinstance(payload, Mapping):
        return {
            str(key): _resolve_env_vars(value, path=f"{path}.{key}")
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [
            _resolve_env_vars(value, path=f"{path}[{index}]") for index, value in enumerate(payload)
        ]
    if isinstance(payload, str):
        return _substitute_env(payload, path=path)
    return payload


def _substitute_env(value: str, *, path: str) -> str:
    def replace(match: re.Match[str]) -> str:
        key = match.group(1)
        env_value = os.environ.get(key)
        if env_value is None:
            raise ConfigError(f"Missing environment variable '{key}' at {path}")
        return env_value

    return _ENV_VAR_PATTERN.sub(replace, value)


def build_parameters(
    cli_payload: Mapping[str, Any],
    *,
    config_path: str | Path | None = None,
) -> RunParameters:
    """
    Validate run parameters.

    Values from the YAML config file act as defaults; anything given on the command line
    (i.e. not None) wins.
    """
    payload: dict[str, Any] = {}
    if config_path is not None:
        payload.update(resolve_env_vars(load_yaml(config_path)))
    payload.update({key: value for key, value in cli_payload.items() if value is not None})
    try:
        return RunParameters.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(_format_validation_error("parameters", exc)) from exc


def _format_validation_error(prefix: str, exc: ValidationError) -> str:
    details: list[str] = []
    for error in exc.errors(include_url=False):
        loc = ".".join(str(part) for part in error["loc"])
        details.append(f"{prefix}.{loc}: {error['msg']}")
    return "; ".join(details)
