from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ResultReceiver(Protocol):
    """
    Destination for the results an algorithm emits.

    One receiver instance is shared by every result capability of an algorithm.
    """

    def accept(self, result: Any) -> None:
        """Take ownership of a single result."""
        ...

    def close(self) -> None:
        """Persist or flush everything received so far."""
        ...


@runtime_checkable
class FunctionalDependencyAlgorithm(Protocol):
    def set_functional_dependency_receiver(self, receiver: ResultReceiver) -> None: ...


@runtime_checkable
class InclusionDependencyAlgorithm(Protocol):
    def set_inclusion_dependency_receiver(self, receiver: ResultReceiver) -> None: ...


@runtime_checkable
class UniqueColumnCombinationsAlgorithm(Protocol):
    def set_unique_column_combination_receiver(self, receiver: ResultReceiver) -> None: ...


@runtime_checkable
class BasicStatisticsAlgorithm(Protocol):
    def set_basic_statistics_receiver(self, receiver: ResultReceiver) -> None: ...


@runtime_checkable
class OrderDependencyAlgorithm(Protocol):
    def set_order_dependency_receiver(self, receiver: ResultReceiver) -> None: ...


@runtime_checkable
class MultivaluedDependencyAlgorithm(Protocol):
    def set_multivalued_dependency_receiver(self, receiver: ResultReceiver) -> None: ...
