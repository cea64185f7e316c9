from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from algo_harness.inputs.generators import (
        DatabaseConnectionGenerator,
        FileInputGenerator,
        HdfsInputGenerator,
        RelationalInputGenerator,
        TableInputGenerator,
    )


@runtime_checkable
class RelationalInputParameterAlgorithm(Protocol):
    """Accepts any generator that can produce row-wise relational input (files or tables)."""

    def set_relational_input_configuration_value(
        self, key: str, *generators: RelationalInputGenerator
    ) -> None: ...


@runtime_checkable
class FileInputParameterAlgorithm(Protocol):
    def set_file_input_configuration_value(
        self, key: str, *generators: FileInputGenerator
    ) -> None: ...


@runtime_checkable
class TableInputParameterAlgorithm(Protocol):
    def set_table_input_configuration_value(
        self, key: str, *generators: TableInputGenerator
    ) -> None: ...


@runtime_checkable
class HdfsInputParameterAlgorithm(Protocol):
    def set_hdfs_input_configuration_value(
        self, key: str, *generators: HdfsInputGenerator
    ) -> None: ...


@runtime_checkable
class DatabaseConnectionParameterAlgorithm(Protocol):
    def set_database_connection_configuration_value(
        self, key: str, *generators: DatabaseConnectionGenerator
    ) -> None: ...
