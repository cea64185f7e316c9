from __future__ import annotations

import logging
from typing import Any

from algo_harness.contracts import ExperimentMetadata, ResultReceiver
from algo_harness.errors import AlgorithmConfigurationError
from algo_harness.outputs.results import BasicStatistic, ColumnIdentifier

logger = logging.getLogger("plugins.column_statistics")

INPUT_KEY = "INPUT_FILES"


class ColumnStatisticsAlgorithm:
    """
    Single-column statistics over relational inputs.

    Configuration: ``MAX_ROWS`` (int, 0 = all rows) and ``COUNT_NULLS`` (bool).
    """

    def __init__(self) -> None:
        self._inputs: tuple[Any, ...] = ()
        self._receiver: ResultReceiver | None = None
        self._max_rows = 0
        self._count_nulls = True
        self.metadata: ExperimentMetadata | None = None

    def set_relational_input_configuration_value(self, key: str, *generators: Any) -> None:
        if key != INPUT_KEY:
            raise AlgorithmConfigurationError(f"Unknown input key {key!r}, expected {INPUT_KEY}")
        self._inputs = generators

    def set_integer_configuration_value(self, key: str, value: int) -> None:
        if key != "MAX_ROWS":
            raise AlgorithmConfigurationError(f"Unknown integer parameter {key!r}")
        if value < 0:
            raise AlgorithmConfigurationError("MAX_ROWS must be >= 0")
        self._max_rows = value

    def set_boolean_configuration_value(self, key: str, value: bool) -> None:
        if key != "COUNT_NULLS":
            raise AlgorithmConfigurationError(f"Unknown boolean parameter {key!r}")
        self._count_nulls = value

    def set_basic_statistics_receiver(self, receiver: ResultReceiver) -> None:
        self._receiver = receiver

    def set_experiment_metadata(self, metadata: ExperimentMetadata) -> None:
        self.metadata = metadata

    def execute(self) -> None:
        if self._receiver is None:
            raise AlgorithmConfigurationError("No result receiver configured.")
        if not self._inputs:
            raise AlgorithmConfigurationError("No inputs configured.")

        for generator in self._inputs:
            relational_input = generator.generate_new_copy()
            try:
                self._profile(relational_input)
            finally:
                relational_input.close()

    def _profile(self, relational_input: Any) -> None:
        columns = list(relational_input.column_names)
        distinct: list[set[str]] = [set() for _ in columns]
        nulls = [0] * len(columns)
        rows = 0
        for row in relational_input:
            if self._max_rows and rows >= self._max_rows:
                break
            rows += 1
            for index, value in enumerate(row):
                if value is None:
                    nulls[index] += 1
                else:
                    distinct[index].add(value)

        logger.info("Profiled %d row(s) of %s", rows, relational_input.relation_name)
        for index, column in enumerate(columns):
            statistics: dict[str, Any] = {
                "rows": rows,
                "distinct_values": len(distinct[index]),
            }
            if self._count_nulls:
                statistics["nulls"] = nulls[index]
            if distinct[index]:
                statistics["min"] = min(distinct[index])
                statistics["max"] = max(distinct[index])
            self._receiver.accept(
                BasicStatistic(
                    columns=(ColumnIdentifier(relational_input.relation_name, column),),
                    statistics=statistics,
                )
            )
