from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from algo_harness.contracts.run_contracts.experiment import ExperimentMetadata
    from algo_harness.tempfiles import TempFileGenerator


@runtime_checkable
class Algorithm(Protocol):
    """
    Algorithm interface contract.

    Algorithms are instantiated with no arguments, configured through whichever
    optional capability contracts they implement and then executed exactly once.
    """

    def execute(self) -> None:
        """Run the algorithm against the configured inputs and result receivers."""
        ...


@runtime_checkable
class BooleanParameterAlgorithm(Protocol):
    def set_boolean_configuration_value(self, key: str, value: bool) -> None: ...


@runtime_checkable
class IntegerParameterAlgorithm(Protocol):
    def set_integer_configuration_value(self, key: str, value: int) -> None: ...


@runtime_checkable
class StringParameterAlgorithm(Protocol):
    def set_string_configuration_value(self, key: str, value: str) -> None: ...


@runtime_checkable
class TempFileAlgorithm(Protocol):
    """Algorithms that spill intermediate data to disk ask for a temp-file facility."""

    def set_temp_file_generator(self, generator: TempFileGenerator) -> None: ...


@runtime_checkable
class ExperimentMetadataAlgorithm(Protocol):
    def set_experiment_metadata(self, metadata: ExperimentMetadata) -> None: ...
