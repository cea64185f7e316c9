from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, field, is_dataclass
from typing import Any, ClassVar


@dataclass(frozen=True, slots=True)
class ColumnIdentifier:
    table: str
    column: str

    def __str__(self) -> str:
        return f"{self.table}.{self.column}"


def _columns(columns: Sequence[ColumnIdentifier]) -> str:
    return "[" + ", ".join(str(column) for column in columns) + "]"


@dataclass(frozen=True, slots=True)
class FunctionalDependency:
    result_kind: ClassVar[str] = "fd"

    determinant: tuple[ColumnIdentifier, ...]
    dependant: ColumnIdentifier

    def __str__(self) -> str:
        return f"{_columns(self.determinant)} --> {self.dependant}"


@dataclass(frozen=True, slots=True)
class InclusionDependency:
    result_kind: ClassVar[str] = "ind"

    dependant: tuple[ColumnIdentifier, ...]
    referenced: tuple[ColumnIdentifier, ...]

    def __str__(self) -> str:
        return f"{_columns(self.dependant)} [= {_columns(self.referenced)}"


@dataclass(frozen=True, slots=True)
class UniqueColumnCombination:
    result_kind: ClassVar[str] = "ucc"

    columns: tuple[ColumnIdentifier, ...]

    def __str__(self) -> str:
        return _columns(self.columns)


@dataclass(frozen=True, slots=True)
class BasicStatistic:
    result_kind: ClassVar[str] = "statistic"

    columns: tuple[ColumnIdentifier, ...]
    statistics: Mapping[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        values = ", ".join(f"{name}={value}" for name, value in sorted(self.statistics.items()))
        return f"{_columns(self.columns)}: {values}"


@dataclass(frozen=True, slots=True)
class OrderDependency:
    result_kind: ClassVar[str] = "od"

    lhs: tuple[ColumnIdentifier, ...]
    rhs: tuple[ColumnIdentifier, ...]
    ascending: bool = True

    def __str__(self) -> str:
        arrow = "~>" if self.ascending else "~>(desc)"
        return f"{_columns(self.lhs)} {arrow} {_columns(self.rhs)}"


@dataclass(frozen=True, slots=True)
class MultivaluedDependency:
    result_kind: ClassVar[str] = "mvd"

    determinant: tuple[ColumnIdentifier, ...]
    dependant: tuple[ColumnIdentifier, ...]

    def __str__(self) -> str:
        return f"{_columns(self.determinant)} ->-> {_columns(self.dependant)}"


def result_kind(result: Any) -> str:
    return getattr(result, "result_kind", type(result).__name__.lower())


def result_to_dict(result: Any) -> dict[str, Any]:
    """Serialize a result for persistence; unknown result types are stored as their text."""
    if is_dataclass(result) and not isinstance(result, type):
        payload = asdict(result)
    elif isinstance(result, Mapping):
        payload = dict(result)
    else:
        payload = {"value": str(result)}
    payload["type"] = result_kind(result)
    return payload
