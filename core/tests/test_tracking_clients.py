import importlib
import sys

import pytest

from algo_harness.tracking import FakeTrackingClient, mlflow_client


class _FakeRunInfo:
    def __init__(self, run_id: str) -> None:
        self.run_id = run_id


class _FakeRun:
    def __init__(self, run_id: str) -> None:
        self.info = _FakeRunInfo(run_id)


class FakeMlflow:
    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[object, ...], dict[str, object]]] = []
        self._active_run: _FakeRun | None = None

    def set_tracking_uri(self, uri: str) -> None:
        self.calls.append(("set_tracking_uri", (uri,), {}))

    def set_experiment(self, name: str) -> None:
        self.calls.append(("set_experiment", (name,), {}))

    def start_run(self, *, run_name: str, tags: dict[str, str]) -> _FakeRun:
        self.calls.append(("start_run", (run_name,), {"tags": tags}))
        self._active_run = _FakeRun("run_123")
        return self._active_run

    def end_run(self, *, status: str) -> None:
        self.calls.append(("end_run", (), {"status": status}))
        self._active_run = None

    def active_run(self) -> _FakeRun | None:
        return self._active_run

    def log_params(self, params: dict[str, object]) -> None:
        self.calls.append(("log_params", (), {"params": params}))

    def log_metric(self, key: str, value: float) -> None:
        self.calls.append(("log_metric", (key, value), {}))


@pytest.fixture
def fake_mlflow(monkeypatch):
    fake = FakeMlflow()
    monkeypatch.setitem(sys.modules, "mlflow", fake)
    yield fake, importlib.reload(mlflow_client)
    monkeypatch.undo()
    importlib.reload(mlflow_client)


def test_fake_tracking_client_records_measurements():
    client = FakeTrackingClient()

    measurement_id = client.open_measurement("exp", labels={"tag.nightly": "true"})
    client.record_configuration({"MAX_ROWS": "10"})
    client.record_elapsed(12)
    assert client.open_measurement_id == measurement_id
    client.close_measurement(status="ok")

    (measurement,) = client.measurements
    assert measurement_id == "measurement_1"
    assert measurement.experiment_key == "exp"
    assert measurement.labels == {"tag.nightly": "true"}
    assert measurement.configuration == {"MAX_ROWS": "10"}
    assert measurement.elapsed_ms == 12
    assert measurement.closed
    assert client.open_measurement_id is None


def test_fake_tracking_client_strict_lifecycle():
    client = FakeTrackingClient()

    with pytest.raises(RuntimeError, match="No open measurement"):
        client.record_elapsed(1)

    client.open_measurement("exp", labels={})

    with pytest.raises(RuntimeError, match="already open"):
        client.open_measurement("dup", labels={})

    client.close_measurement(status="ok")

    with pytest.raises(RuntimeError, match="No open measurement"):
        client.close_measurement(status="failed")


def test_fake_tracking_client_simulated_failure():
    client = FakeTrackingClient(fail_on="record_configuration")
    client.open_measurement("exp", labels={})

    with pytest.raises(RuntimeError, match="Simulated tracking failure in record_configuration"):
        client.record_configuration({"a": "1"})


def test_mlflow_measurement_is_one_run(fake_mlflow):
    fake, module = fake_mlflow
    client = module.MlflowTrackingClient(tracking_uri="http://mlflow", experiment_name="exp")

    run_id = client.open_measurement("exp", labels={"execution_id": "run42"})
    client.record_configuration({"MAX_ROWS": "10"})
    client.record_elapsed(5)
    client.close_measurement(status="failed")

    assert run_id == "run_123"
    assert client.open_measurement_id is None
    assert fake.calls == [
        ("set_tracking_uri", ("http://mlflow",), {}),
        ("set_experiment", ("exp",), {}),
        ("start_run", ("exp",), {"tags": {"execution_id": "run42"}}),
        ("log_params", (), {"params": {"MAX_ROWS": "10"}}),
        ("log_metric", ("elapsed_ms", 5.0), {}),
        ("end_run", (), {"status": "FAILED"}),
    ]


def test_mlflow_empty_configuration_logs_no_params(fake_mlflow):
    fake, module = fake_mlflow
    client = module.MlflowTrackingClient()

    client.open_measurement("exp", labels={})
    client.record_configuration({})
    client.close_measurement(status="ok")

    assert [call[0] for call in fake.calls] == ["start_run", "end_run"]
    assert fake.calls[-1][2] == {"status": "FINISHED"}


def test_mlflow_tracking_client_strict_lifecycle(fake_mlflow):
    _, module = fake_mlflow
    client = module.MlflowTrackingClient(experiment_name="exp")

    with pytest.raises(RuntimeError, match="No active MLflow run"):
        client.record_elapsed(1)

    client.open_measurement("exp", labels={})

    with pytest.raises(RuntimeError, match="already active"):
        client.open_measurement("dup", labels={})

    client.close_measurement(status="ok")


def test_mlflow_missing_is_reported(monkeypatch):
    monkeypatch.setattr(mlflow_client, "_mlflow", None)

    with pytest.raises(RuntimeError, match="mlflow is not installed"):
        mlflow_client.MlflowTrackingClient()
