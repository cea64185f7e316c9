from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from algo_harness.contracts.run_contracts.execution_report import RunStatus


@dataclass
class Measurement:
    """One appended measurement as the fake store saw it."""

    experiment_key: str
    labels: dict[str, str]
    configuration: dict[str, str] = field(default_factory=dict)
    elapsed_ms: int | None = None
    status: RunStatus | None = None

    @property
    def closed(self) -> bool:
        return self.status is not None


class FakeTrackingClient:
    """
    In-memory experiment store for tests and dry runs.

    ``fail_on`` names a step (``open_measurement``, ``record_configuration``,
    ``record_elapsed`` or ``close_measurement``) that raises instead of recording.
    """

    def __init__(self, *, fail_on: str | None = None) -> None:
        self._fail_on = fail_on
        self._measurements: list[Measurement] = []
        self._open: Measurement | None = None

    @property
    def measurements(self) -> list[Measurement]:
        return list(self._measurements)

    @property
    def open_measurement_id(self) -> str | None:
        if self._open is None:
            return None
        return f"measurement_{len(self._measurements)}"

    def open_measurement(self, experiment_key: str, *, labels: Mapping[str, str]) -> str:
        self._maybe_fail("open_measurement")
        if self._open is not None:
            raise RuntimeError("A measurement is already open.")
        self._open = Measurement(experiment_key=experiment_key, labels=dict(labels))
        self._measurements.append(self._open)
        return f"measurement_{len(self._measurements)}"

    def record_configuration(self, pairs: Mapping[str, str]) -> None:
        self._current("record_configuration").configuration.update(pairs)

    def record_elapsed(self, elapsed_ms: int) -> None:
        self._current("record_elapsed").elapsed_ms = elapsed_ms

    def close_measurement(self, *, status: RunStatus) -> None:
        self._current("close_measurement").status = status
        self._open = None

    def _current(self, step: str) -> Measurement:
        if self._open is None:
            raise RuntimeError("No open measurement. Call open_measurement first.")
        self._maybe_fail(step)
        return self._open

    def _maybe_fail(self, step: str) -> None:
        if step == self._fail_on:
            raise RuntimeError(f"Simulated tracking failure in {step}")
