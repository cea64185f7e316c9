from __future__ import annotations

import json

import pytest

from algo_harness.api import run_algorithm
from algo_harness.configuration import build_parameters
from algo_harness.contracts import RunPhase
from algo_harness.errors import (
    AlgorithmConfigurationError,
    ExitCode,
    IllegalCharacterError,
    NoCompatibleInputError,
    PluginInstantiationError,
    SinkCloseError,
)
from algo_harness.inputs import FileInputGenerator, InputResolver
from algo_harness.orchestration.registry import DictPluginRegistry
from algo_harness.outputs.results import ColumnIdentifier, FunctionalDependency
from algo_harness.testkit.dummies import FailingAlgorithm, RecordingAlgorithm
from algo_harness.tracking import FakeTrackingClient

A = ColumnIdentifier("t", "a")
B = ColumnIdentifier("t", "b")
C = ColumnIdentifier("t", "c")
R1 = FunctionalDependency(determinant=(A,), dependant=B)
R2 = FunctionalDependency(determinant=(A,), dependant=C)
R3 = FunctionalDependency(determinant=(B,), dependant=C)


class _Console:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def __call__(self, line: str) -> None:
        self.lines.append(line)


class _NoInputs:
    def set_functional_dependency_receiver(self, receiver) -> None:
        self.receiver = receiver

    def execute(self) -> None:
        raise AssertionError("must not run")


class _RejectsConfig(RecordingAlgorithm):
    def set_integer_configuration_value(self, key: str, value: int) -> None:
        raise ValueError(f"{key} out of range")


class _TableOnly:
    def set_table_input_configuration_value(self, key, *generators) -> None:
        self.generators = generators

    def execute(self) -> None:
        pass


class _ExplodingSink(RecordingAlgorithm):
    def set_functional_dependency_receiver(self, receiver) -> None:
        receiver.close = _raise_oserror
        super().set_functional_dependency_receiver(receiver)


class _TrackingResolver(InputResolver):
    def __init__(self) -> None:
        super().__init__()
        self.generators = []

    def resolve_all(self, specs, requested_kind):
        generators = super().resolve_all(specs, requested_kind)
        self.generators.extend(generators)
        return generators


def _raise_oserror() -> None:
    raise OSError("disk full")


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "t.csv"
    path.write_text("1;2;3\n", encoding="utf-8")
    return path


def _parameters(data_file, tmp_path, **overrides):
    payload = {
        "algorithm": "algo",
        "input_key": "INPUT",
        "inputs": [str(data_file)],
        "results_dir": str(tmp_path / "results"),
    }
    payload.update(overrides)
    return build_parameters(payload)


def test_print_mode_echoes_results_in_order_and_persists(data_file, tmp_path):
    algorithm = RecordingAlgorithm(results=[R1, R2, R3])
    registry = DictPluginRegistry(factories={"algo": lambda: algorithm})
    console = _Console()

    report = run_algorithm(
        _parameters(data_file, tmp_path, output="print", algorithm_config=["MAX:3", "on:true"]),
        registry=registry,
        console=console,
    )

    assert report.succeeded
    assert report.exit_code is ExitCode.OK
    assert report.phase is RunPhase.DONE
    assert report.output_mode == "print"
    assert algorithm.values == {"MAX": 3, "on": True}
    assert isinstance(algorithm.inputs["INPUT"][0], FileInputGenerator)

    assert console.lines[0].startswith("Elapsed time: 0:00:")
    assert console.lines[1:] == ["Results:", str(R1), str(R2), str(R3)]
    assert algorithm.receiver.fetch_new_results() == []

    persisted = tmp_path / "results" / f"{report.execution_id}_fds.jsonl"
    assert len(persisted.read_text(encoding="utf-8").splitlines()) == 3


def test_file_mode_persists_without_echo(data_file, tmp_path):
    registry = DictPluginRegistry(factories={"algo": lambda: RecordingAlgorithm(results=[R1])})
    console = _Console()

    report = run_algorithm(
        _parameters(data_file, tmp_path, output="file:run42"), registry=registry, console=console
    )

    assert report.execution_id == "run42"
    assert "Results:" not in console.lines
    (row,) = (tmp_path / "results" / "run42_fds.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(row)["type"] == "fd"


def test_none_mode_writes_nothing(data_file, tmp_path):
    registry = DictPluginRegistry(factories={"algo": lambda: RecordingAlgorithm(results=[R1])})

    report = run_algorithm(
        _parameters(data_file, tmp_path, output="none"), registry=registry, console=_Console()
    )

    assert report.succeeded
    assert not (tmp_path / "results").exists()


def test_crashing_algorithm_still_closes_sink_and_reports(data_file, tmp_path):
    tracking = FakeTrackingClient()
    resolver = _TrackingResolver()
    registry = DictPluginRegistry(factories={"algo": lambda: FailingAlgorithm(results=[R1])})

    report = run_algorithm(
        _parameters(
            data_file,
            tmp_path,
            output="file:crash",
            experiment="exp",
            experiment_tags=["nightly"],
        ),
        registry=registry,
        tracking=tracking,
        input_resolver=resolver,
        console=_Console(),
    )

    assert report.status == "failed"
    assert report.exit_code is ExitCode.EXECUTION_FAILED
    assert report.message == "RuntimeError: boom"
    assert (tmp_path / "results" / "crash_fds.jsonl").exists()
    (measurement,) = tracking.measurements
    assert measurement.labels["tag.nightly"] == "true"
    assert measurement.configuration == {"algorithm": "algo", "output": "file:crash"}
    assert measurement.status == "failed"
    assert all(not generator._open for generator in resolver.generators)


def test_telemetry_failure_does_not_change_outcome(data_file, tmp_path):
    registry = DictPluginRegistry(factories={"algo": RecordingAlgorithm})

    report = run_algorithm(
        _parameters(data_file, tmp_path, experiment="exp"),
        registry=registry,
        tracking=FakeTrackingClient(fail_on="open_measurement"),
        console=_Console(),
    )

    assert report.exit_code is ExitCode.OK


def test_algorithm_without_input_capability(data_file, tmp_path):
    registry = DictPluginRegistry(factories={"algo": _NoInputs})

    with pytest.raises(NoCompatibleInputError) as excinfo:
        run_algorithm(_parameters(data_file, tmp_path), registry=registry, console=_Console())

    assert excinfo.value.exit_code is ExitCode.NO_COMPATIBLE_CAPABILITY


def test_file_inputs_offered_to_table_only_algorithm(data_file, tmp_path):
    registry = DictPluginRegistry(factories={"algo": _TableOnly})

    with pytest.raises(NoCompatibleInputError):
        run_algorithm(_parameters(data_file, tmp_path), registry=registry, console=_Console())


def test_hdfs_only_inputs_are_not_relational(tmp_path):
    registry = DictPluginRegistry(factories={"algo": RecordingAlgorithm})
    parameters = build_parameters(
        {
            "algorithm": "algo",
            "input_key": "INPUT",
            "inputs": ["hdfs://nn/part-0"],
            "output": "none",
        }
    )

    with pytest.raises(NoCompatibleInputError, match="None of the inputs"):
        run_algorithm(parameters, registry=registry, console=_Console())


def test_sink_close_failure(data_file, tmp_path):
    registry = DictPluginRegistry(factories={"algo": lambda: _ExplodingSink(results=[R1])})

    with pytest.raises(SinkCloseError, match="disk full") as excinfo:
        run_algorithm(_parameters(data_file, tmp_path), registry=registry, console=_Console())

    assert excinfo.value.exit_code is ExitCode.SINK_CLOSE_FAILURE


def test_instantiation_failure_is_setup_error(data_file, tmp_path):
    def _explode():
        raise RuntimeError("no license")

    registry = DictPluginRegistry(factories={"algo": _explode})

    with pytest.raises(PluginInstantiationError) as excinfo:
        run_algorithm(_parameters(data_file, tmp_path), registry=registry, console=_Console())

    assert excinfo.value.exit_code is ExitCode.SETUP_FAILURE


def test_rejected_configuration_value_is_setup_error(data_file, tmp_path):
    registry = DictPluginRegistry(factories={"algo": _RejectsConfig})

    with pytest.raises(AlgorithmConfigurationError, match="MAX out of range"):
        run_algorithm(
            _parameters(data_file, tmp_path, algorithm_config=["MAX:99"]),
            registry=registry,
            console=_Console(),
        )


def test_illegal_separator_is_setup_error(data_file, tmp_path):
    registry = DictPluginRegistry(factories={"algo": RecordingAlgorithm})

    with pytest.raises(IllegalCharacterError):
        run_algorithm(
            _parameters(data_file, tmp_path, separator="colon"),
            registry=registry,
            console=_Console(),
        )


def test_crate_mode_appends_into_store(data_file, tmp_path):
    store = tmp_path / "meta.json"
    store.write_text(json.dumps({"schemas": {"profiling": {}}}), encoding="utf-8")
    registry = DictPluginRegistry(factories={"algo": lambda: RecordingAlgorithm(results=[R1, R2])})

    report = run_algorithm(
        _parameters(data_file, tmp_path, output=f"crate:{store}:profiling"),
        registry=registry,
        console=_Console(),
    )

    assert report.output_mode == "crate"
    document = json.loads(store.read_text(encoding="utf-8"))
    assert len(document["schemas"]["profiling"]["results"]) == 2
