from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from algo_harness.errors import InputResolutionError
from algo_harness.inputs.generators import (
    Connector,
    DatabaseConnectionGenerator,
    FileInputGenerator,
    HdfsInputGenerator,
    InputGenerator,
    TableInputGenerator,
)
from algo_harness.inputs.settings import (
    DatabaseConnectionSetting,
    FileInputSetting,
    FileParsingConfig,
    InputKind,
    TableInputSetting,
)

logger = logging.getLogger("algo_harness.inputs.resolver")

LOAD_PREFIX = "load:"
HDFS_PREFIX = "hdfs://"


@dataclass(frozen=True, slots=True)
class InputSpec:
    """
    One data-source token plus the configuration shared by every input of a run.

    Tokens listed in an indirection file are resolved against this same configuration.
    """

    token: str
    parsing: FileParsingConfig = field(default_factory=FileParsingConfig)
    credentials: DatabaseConnectionSetting | None = None

    @property
    def is_indirection(self) -> bool:
        return self.token.startswith(LOAD_PREFIX)


class InputResolver:
    """Turns input tokens into generators of a requested kind. Stateless between calls."""

    def __init__(self, *, connector: Connector | None = None) -> None:
        self._connector = connector

    def resolve(self, spec: InputSpec, requested_kind: InputKind) -> list[InputGenerator]:
        if spec.is_indirection:
            tokens = _read_indirection_file(Path(spec.token[len(LOAD_PREFIX) :]))
        else:
            tokens = [spec.token]

        generators = [self._create(token, spec, requested_kind) for token in tokens]
        usable = [generator for generator in generators if requested_kind in generator.kinds]
        dropped = len(generators) - len(usable)
        if dropped:
            logger.info(
                "Dropped %d input(s) of %r that cannot serve as %s input",
                dropped,
                spec.token,
                requested_kind.value,
            )
        return usable

    def resolve_all(
        self, specs: Iterable[InputSpec], requested_kind: InputKind
    ) -> list[InputGenerator]:
        resolved: list[InputGenerator] = []
        for spec in specs:
            resolved.extend(self.resolve(spec, requested_kind))
        return resolved

    def _create(self, token: str, spec: InputSpec, requested_kind: InputKind) -> InputGenerator:
        if not token:
            raise InputResolutionError("Could not create input generator: empty input token.")
        try:
            if spec.credentials is not None:
                if requested_kind is InputKind.DATABASE_CONNECTION:
                    return DatabaseConnectionGenerator(spec.credentials, connector=self._connector)
                return TableInputGenerator(
                    TableInputSetting(table=token, connection=spec.credentials),
                    connector=self._connector,
                )
            setting = FileInputSetting(path=token, parsing=spec.parsing)
        except ValidationError as exc:
            raise InputResolutionError(
                f"Could not create input generator for {token!r}: {exc}"
            ) from exc

        if token.startswith(HDFS_PREFIX):
            return HdfsInputGenerator(setting)
        return FileInputGenerator(setting)


def _read_indirection_file(path: Path) -> list[str]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputResolutionError(
            f"Could not load input specification file {path}: {exc}"
        ) from exc
    return [line.strip() for line in content.splitlines() if line.strip()]
