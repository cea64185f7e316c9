from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from algo_harness.contracts.run_contracts.execution_report import RunStatus

try:
    import mlflow as _mlflow
except Exception:  # pragma: no cover - handled via runtime error
    _mlflow = None

ELAPSED_METRIC = "elapsed_ms"

_MLFLOW_STATUS: dict[str, str] = {
    "ok": "FINISHED",
    "failed": "FAILED",
}


def _require_mlflow() -> Any:
    if _mlflow is None:
        raise RuntimeError(
            "mlflow is not installed. Install with `pip install -e \".[tracking]\"`."
        )
    return _mlflow


class MlflowTrackingClient:
    """
    Experiment store backed by MLflow.

    A measurement is one MLflow run named after the experiment key: labels become run tags,
    configuration pairs become params and the elapsed time is logged as ``elapsed_ms``.
    """

    def __init__(
        self,
        *,
        tracking_uri: str | None = None,
        experiment_name: str | None = None,
    ) -> None:
        self._mlflow = _require_mlflow()
        self._run_id: str | None = None

        if tracking_uri is not None:
            self._mlflow.set_tracking_uri(tracking_uri)
        if experiment_name is not None:
            self._mlflow.set_experiment(experiment_name)

    @property
    def open_measurement_id(self) -> str | None:
        return self._run_id

    def open_measurement(self, experiment_key: str, *, labels: Mapping[str, str]) -> str:
        if self._run_id is not None or self._mlflow.active_run() is not None:
            raise RuntimeError("An MLflow run is already active.")
        run = self._mlflow.start_run(run_name=experiment_key, tags=dict(labels))
        self._run_id = run.info.run_id
        return self._run_id

    def record_configuration(self, pairs: Mapping[str, str]) -> None:
        self._require_open()
        if pairs:
            self._mlflow.log_params(dict(pairs))

    def record_elapsed(self, elapsed_ms: int) -> None:
        self._require_open()
        self._mlflow.log_metric(ELAPSED_METRIC, float(elapsed_ms))

    def close_measurement(self, *, status: RunStatus) -> None:
        self._require_open()
        self._mlflow.end_run(status=_MLFLOW_STATUS[status])
        self._run_id = None

    def _require_open(self) -> None:
        if self._run_id is None:
            raise RuntimeError("No active MLflow run. Call open_measurement first.")
