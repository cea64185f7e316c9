from __future__ import annotations

import importlib
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from algo_harness.contracts import Algorithm, PluginNotFoundError, PluginRegistry
from algo_harness.errors import PluginInstantiationError

AlgorithmFactory = Callable[[], Algorithm]


@dataclass
class DictPluginRegistry(PluginRegistry):
    factories: dict[str, AlgorithmFactory]

    def create(self, name: str) -> Algorithm:
        try:
            factory = self.factories[name]
        except KeyError as e:
            raise PluginNotFoundError(name) from e
        return _instantiate(name, factory)

    def list(self) -> Iterable[str]:
        return sorted(self.factories)


@dataclass
class ImportPluginRegistry(PluginRegistry):
    """
    Loads algorithms by class name.

    Names are looked up in ``aliases`` first and otherwise imported as
    ``package.module.ClassName`` or ``package.module:ClassName``.
    """

    aliases: Mapping[str, str] = field(default_factory=dict)

    def create(self, name: str) -> Algorithm:
        target = self.aliases.get(name, name)
        return _instantiate(name, _import_class(target))

    def list(self) -> Iterable[str]:
        return sorted(self.aliases)


def _import_class(target: str) -> AlgorithmFactory:
    if ":" in target:
        module_name, _, attribute = target.partition(":")
    else:
        module_name, _, attribute = target.rpartition(".")
    if not module_name or not attribute:
        raise PluginNotFoundError(target)

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise PluginNotFoundError(target) from exc
    except Exception as exc:
        raise PluginInstantiationError(f"Could not import {module_name}: {exc}") from exc

    obj: object = module
    for part in attribute.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise PluginNotFoundError(target) from exc
    if not isinstance(obj, type):
        raise PluginInstantiationError(f"{target} is not a class")
    return obj


def _instantiate(name: str, factory: AlgorithmFactory) -> Algorithm:
    try:
        algorithm = factory()
    except Exception as exc:
        raise PluginInstantiationError(f"Could not instantiate algorithm {name}: {exc}") from exc
    if not isinstance(algorithm, Algorithm):
        raise PluginInstantiationError(f"{name} does not implement execute()")
    return algorithm
