"""
Capability discovery and dispatch.

An algorithm implements an unknown subset of the capability contracts. The subset is
discovered once when the algorithm is loaded; every later configuration step is a lookup
into that set rather than a fresh type test.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from algo_harness.contracts.algorithm_contracts import (
    Algorithm,
    BasicStatisticsAlgorithm,
    BooleanParameterAlgorithm,
    DatabaseConnectionParameterAlgorithm,
    ExperimentMetadataAlgorithm,
    FileInputParameterAlgorithm,
    FunctionalDependencyAlgorithm,
    HdfsInputParameterAlgorithm,
    InclusionDependencyAlgorithm,
    IntegerParameterAlgorithm,
    MultivaluedDependencyAlgorithm,
    OrderDependencyAlgorithm,
    RelationalInputParameterAlgorithm,
    ResultReceiver,
    StringParameterAlgorithm,
    TableInputParameterAlgorithm,
    TempFileAlgorithm,
    UniqueColumnCombinationsAlgorithm,
)
from algo_harness.contracts.run_contracts.experiment import ExperimentMetadata
from algo_harness.errors import ConfigError
from algo_harness.inputs.settings import InputKind
from algo_harness.tempfiles import TempFileGenerator

logger = logging.getLogger("algo_harness.capabilities")

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# Integer configuration values are signed 32-bit; anything wider is delivered as a string.
INTEGER_MIN = -(2**31)
INTEGER_MAX = 2**31 - 1


class Capability(str, Enum):
    BOOLEAN_CONFIG = "accepts-bool-config"
    INTEGER_CONFIG = "accepts-int-config"
    STRING_CONFIG = "accepts-string-config"
    RELATIONAL_INPUT = "accepts-relational-input"
    FILE_INPUT = "accepts-file-input"
    TABLE_INPUT = "accepts-table-input"
    HDFS_INPUT = "accepts-hdfs-input"
    DATABASE_CONNECTION_INPUT = "accepts-db-connection-input"
    TEMP_FILES = "accepts-temp-file-facility"
    EXPERIMENT_METADATA = "wants-experiment-metadata"
    FUNCTIONAL_DEPENDENCY_RESULTS = "emits-functional-dependency-results"
    INCLUSION_DEPENDENCY_RESULTS = "emits-inclusion-dependency-results"
    UNIQUE_COLUMN_COMBINATION_RESULTS = "emits-unique-column-combination-results"
    BASIC_STATISTICS_RESULTS = "emits-basic-statistics-results"
    ORDER_DEPENDENCY_RESULTS = "emits-order-dependency-results"
    MULTIVALUED_DEPENDENCY_RESULTS = "emits-multivalued-dependency-results"


# Capability -> (contract, setter name)
_CONTRACTS: dict[Capability, tuple[type, str]] = {
    Capability.BOOLEAN_CONFIG: (BooleanParameterAlgorithm, "set_boolean_configuration_value"),
    Capability.INTEGER_CONFIG: (IntegerParameterAlgorithm, "set_integer_configuration_value"),
    Capability.STRING_CONFIG: (StringParameterAlgorithm, "set_string_configuration_value"),
    Capability.RELATIONAL_INPUT: (
        RelationalInputParameterAlgorithm,
        "set_relational_input_configuration_value",
    ),
    Capability.FILE_INPUT: (FileInputParameterAlgorithm, "set_file_input_configuration_value"),
    Capability.TABLE_INPUT: (TableInputParameterAlgorithm, "set_table_input_configuration_value"),
    Capability.HDFS_INPUT: (HdfsInputParameterAlgorithm, "set_hdfs_input_configuration_value"),
    Capability.DATABASE_CONNECTION_INPUT: (
        DatabaseConnectionParameterAlgorithm,
        "set_database_connection_configuration_value",
    ),
    Capability.TEMP_FILES: (TempFileAlgorithm, "set_temp_file_generator"),
    Capability.EXPERIMENT_METADATA: (ExperimentMetadataAlgorithm, "set_experiment_metadata"),
    Capability.FUNCTIONAL_DEPENDENCY_RESULTS: (
        FunctionalDependencyAlgorithm,
        "set_functional_dependency_receiver",
    ),
    Capability.INCLUSION_DEPENDENCY_RESULTS: (
        InclusionDependencyAlgorithm,
        "set_inclusion_dependency_receiver",
    ),
    Capability.UNIQUE_COLUMN_COMBINATION_RESULTS: (
        UniqueColumnCombinationsAlgorithm,
        "set_unique_column_combination_receiver",
    ),
    Capability.BASIC_STATISTICS_RESULTS: (
        BasicStatisticsAlgorithm,
        "set_basic_statistics_receiver",
    ),
    Capability.ORDER_DEPENDENCY_RESULTS: (
        OrderDependencyAlgorithm,
        "set_order_dependency_receiver",
    ),
    Capability.MULTIVALUED_DEPENDENCY_RESULTS: (
        MultivaluedDependencyAlgorithm,
        "set_multivalued_dependency_receiver",
    ),
}

INPUT_CAPABILITIES: dict[InputKind, Capability] = {
    InputKind.RELATIONAL: Capability.RELATIONAL_INPUT,
    InputKind.FILE: Capability.FILE_INPUT,
    InputKind.TABLE: Capability.TABLE_INPUT,
    InputKind.HDFS: Capability.HDFS_INPUT,
    InputKind.DATABASE_CONNECTION: Capability.DATABASE_CONNECTION_INPUT,
}

RESULT_CAPABILITIES: tuple[Capability, ...] = (
    Capability.FUNCTIONAL_DEPENDENCY_RESULTS,
    Capability.INCLUSION_DEPENDENCY_RESULTS,
    Capability.UNIQUE_COLUMN_COMBINATION_RESULTS,
    Capability.BASIC_STATISTICS_RESULTS,
    Capability.ORDER_DEPENDENCY_RESULTS,
    Capability.MULTIVALUED_DEPENDENCY_RESULTS,
)


@dataclass(frozen=True)
class PluginHandle:
    """An instantiated algorithm together with the capabilities it was found to implement."""

    algorithm: Algorithm
    setters: Mapping[Capability, Callable[..., None]] = field(default_factory=dict)

    @classmethod
    def discover(cls, algorithm: Algorithm) -> PluginHandle:
        setters: dict[Capability, Callable[..., None]] = {}
        for capability, (contract, setter_name) in _CONTRACTS.items():
            if isinstance(algorithm, contract):
                setters[capability] = getattr(algorithm, setter_name)
        logger.debug(
            "%s implements %s",
            type(algorithm).__name__,
            ", ".join(sorted(capability.value for capability in setters)) or "no capabilities",
        )
        return cls(algorithm=algorithm, setters=setters)

    @property
    def capabilities(self) -> frozenset[Capability]:
        return frozenset(self.setters)

    def supports(self, capability: Capability) -> bool:
        return capability in self.setters

    def supports_input(self, kind: InputKind) -> bool:
        return INPUT_CAPABILITIES[kind] in self.setters

    def execute(self) -> None:
        self.algorithm.execute()


def parse_configuration_item(token: str) -> tuple[str, str]:
    """Split ``key:value`` on the first colon."""
    key, sep, value = token.partition(":")
    if not sep or not key:
        raise ConfigError(f"Algorithm configuration {token!r} must look like <name>:<value>")
    return key, value


def try_parse_boolean(value: str) -> bool | None:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def try_parse_integer(value: str) -> int | None:
    if _INTEGER_PATTERN.fullmatch(value) is None:
        return None
    parsed = int(value, 10)
    if not INTEGER_MIN <= parsed <= INTEGER_MAX:
        return None
    return parsed


def apply_configuration(handle: PluginHandle, key: str, raw_value: str) -> int:
    """
    Deliver one configuration value, coerced boolean -> integer -> string.

    A coercion that reached at least one capability ends the search, so a boolean is never
    delivered a second time as a string. Returns the number of capabilities that took it.
    """
    candidates: list[tuple[Capability, Any]] = []
    boolean_value = try_parse_boolean(raw_value)
    if boolean_value is not None:
        candidates.append((Capability.BOOLEAN_CONFIG, boolean_value))
    integer_value = try_parse_integer(raw_value)
    if integer_value is not None:
        candidates.append((Capability.INTEGER_CONFIG, integer_value))
    candidates.append((Capability.STRING_CONFIG, raw_value))

    for capability, value in candidates:
        setter = handle.setters.get(capability)
        if setter is None:
            continue
        setter(key, value)
        return 1

    logger.warning('Could not set up configuration value "%s".', key)
    return 0


def apply_inputs(
    handle: PluginHandle,
    key: str,
    generators: Sequence[Any],
    requested_kind: InputKind,
) -> bool:
    setter = handle.setters.get(INPUT_CAPABILITIES[requested_kind])
    if setter is None:
        return False
    setter(key, *generators)
    return True


def apply_result_sink(handle: PluginHandle, sink: ResultReceiver) -> bool:
    applied = 0
    for capability in RESULT_CAPABILITIES:
        setter = handle.setters.get(capability)
        if setter is not None:
            setter(sink)
            applied += 1
    if not applied:
        logger.warning("Could not configure any result receiver.")
    return applied > 0


def apply_temp_files(handle: PluginHandle, generator: TempFileGenerator) -> bool:
    setter = handle.setters.get(Capability.TEMP_FILES)
    if setter is None:
        return False
    setter(generator)
    return True


def apply_experiment_metadata(handle: PluginHandle, metadata: ExperimentMetadata) -> bool:
    setter = handle.setters.get(Capability.EXPERIMENT_METADATA)
    if setter is None:
        return False
    setter(metadata)
    return True
