"""Input resolution: tokens and shared parsing/connection settings to input generators."""

from algo_harness.inputs.codec import NO_CHARACTER, to_char
from algo_harness.inputs.credentials import load_pgpass, parse_pgpass
from algo_harness.inputs.generators import (
    DatabaseConnectionGenerator,
    FileInputGenerator,
    HdfsInputGenerator,
    InputGenerator,
    InputIterationError,
    RelationalInputGenerator,
    TableInputGenerator,
)
from algo_harness.inputs.resolver import InputResolver, InputSpec
from algo_harness.inputs.settings import (
    DatabaseConnectionSetting,
    DbSystem,
    FileInputSetting,
    FileParsingConfig,
    InputKind,
    TableInputSetting,
)

__all__ = [
    "NO_CHARACTER",
    "to_char",
    "load_pgpass",
    "parse_pgpass",
    "DatabaseConnectionGenerator",
    "FileInputGenerator",
    "HdfsInputGenerator",
    "InputGenerator",
    "InputIterationError",
    "RelationalInputGenerator",
    "TableInputGenerator",
    "InputResolver",
    "InputSpec",
    "DatabaseConnectionSetting",
    "DbSystem",
    "FileInputSetting",
    "FileParsingConfig",
    "InputKind",
    "TableInputSetting",
]
