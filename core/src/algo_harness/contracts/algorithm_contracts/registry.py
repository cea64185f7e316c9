from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from algo_harness.contracts.algorithm_contracts.algorithm import Algorithm
from algo_harness.errors import PluginInstantiationError


class PluginNotFoundError(PluginInstantiationError, KeyError):
    pass


@runtime_checkable
class PluginRegistry(Protocol):
    def create(self, name: str) -> Algorithm:
        """Return a fresh algorithm instance for name or raise PluginInstantiationError."""
        ...

    def list(self) -> Iterable[str]:
        """List the registered algorithm names (for usage output / debugging)."""
        ...
