from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from algo_harness.contracts import ResultReceiver


class RecordingAlgorithm:
    """
    Relational-input algorithm that records every configuration call.

    On execute() it emits ``results`` to the functional dependency receiver in order.
    """

    def __init__(self, results: Sequence[Any] = ()) -> None:
        self.results = list(results)
        self.values: dict[str, Any] = {}
        self.calls: list[tuple[str, str, Any]] = []
        self.inputs: dict[str, tuple[Any, ...]] = {}
        self.receiver: ResultReceiver | None = None
        self.executed = 0

    def set_boolean_configuration_value(self, key: str, value: bool) -> None:
        self.calls.append(("boolean", key, value))
        self.values[key] = value

    def set_integer_configuration_value(self, key: str, value: int) -> None:
        self.calls.append(("integer", key, value))
        self.values[key] = value

    def set_string_configuration_value(self, key: str, value: str) -> None:
        self.calls.append(("string", key, value))
        self.values[key] = value

    def set_relational_input_configuration_value(self, key: str, *generators: Any) -> None:
        self.inputs[key] = generators

    def set_functional_dependency_receiver(self, receiver: ResultReceiver) -> None:
        self.receiver = receiver

    def execute(self) -> None:
        self.executed += 1
        if self.receiver is None:
            raise RuntimeError("No result receiver configured.")
        for result in self.results:
            self.receiver.accept(result)


class FailingAlgorithm(RecordingAlgorithm):
    """Emits its results and then crashes."""

    def execute(self) -> None:
        super().execute()
        raise RuntimeError("boom")
