from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from algo_harness.contracts.run_contracts.execution_report import RunStatus


@runtime_checkable
class TrackingClient(Protocol):
    """
    Experiment telemetry backend.

    Every harness run appends one measurement to an experiment: it is opened with its labels,
    filled with the run configuration and the elapsed time, and closed with the run status.
    At most one measurement is open at a time.
    """

    @property
    def open_measurement_id(self) -> str | None:
        """Id of the open measurement, if any."""
        ...

    def open_measurement(self, experiment_key: str, *, labels: Mapping[str, str]) -> str: ...

    def record_configuration(self, pairs: Mapping[str, str]) -> None: ...

    def record_elapsed(self, elapsed_ms: int) -> None: ...

    def close_measurement(self, *, status: RunStatus) -> None: ...
