"""
Input generators handed to algorithms.

The set of generators is closed: files, database tables, raw database connections and
distributed-file (HDFS) paths. Each generator declares the input kinds it can serve; the
resolver drops generators whose kinds do not contain the requested kind.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path
from typing import Any, ClassVar, Protocol, TextIO, runtime_checkable

from algo_harness.inputs.codec import NO_CHARACTER
from algo_harness.inputs.settings import (
    DatabaseConnectionSetting,
    FileInputSetting,
    FileParsingConfig,
    InputKind,
    TableInputSetting,
)

logger = logging.getLogger("algo_harness.inputs")

# Opens a DB-API 2.0 connection for a connection setting.
Connector = Callable[[DatabaseConnectionSetting], Any]


class InputIterationError(ValueError):
    pass


class RelationalInput(Protocol):
    relation_name: str
    column_names: Sequence[str]

    def __iter__(self) -> Iterator[list[str | None]]: ...

    def close(self) -> None: ...


@runtime_checkable
class RelationalInputGenerator(Protocol):
    kinds: ClassVar[frozenset[InputKind]]

    def generate_new_copy(self) -> RelationalInput: ...

    def describe(self) -> str: ...

    def close(self) -> None: ...


class CsvRelationalInput:
    """Row iterator over one delimited file."""

    def __init__(self, path: Path, parsing: FileParsingConfig) -> None:
        self.relation_name = path.name
        self._parsing = parsing
        self._handle: TextIO = path.open("r", encoding="utf-8", newline="")
        try:
            for _ in range(parsing.skip_lines):
                if not self._handle.readline():
                    break
            self._reader = csv.reader(self._handle, **_csv_dialect(parsing))
            first = next(self._reader, None)
        except Exception:
            self._handle.close()
            raise

        self._pending: list[str] | None = None
        if first is None:
            self.column_names: list[str] = []
        elif parsing.header:
            self.column_names = list(first)
        else:
            self.column_names = [f"column{index + 1}" for index in range(len(first))]
            self._pending = first

    def __iter__(self) -> Iterator[list[str | None]]:
        width = len(self.column_names)
        if self._pending is not None:
            row, self._pending = self._pending, None
            yield self._normalize(row)
        for line_number, row in enumerate(self._reader, start=1):
            if len(row) != width:
                if self._parsing.skip_differing_lines:
                    logger.debug(
                        "Skipping row %d of %s: %d fields",
                        line_number,
                        self.relation_name,
                        len(row),
                    )
                    continue
                raise InputIterationError(
                    f"{self.relation_name}: expected {width} fields, "
                    f"got {len(row)} in row {line_number}"
                )
            yield self._normalize(row)

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> CsvRelationalInput:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _normalize(self, row: list[str]) -> list[str | None]:
        null = self._parsing.null_string
        return [None if value == null else value for value in row]


class DbApiRelationalInput:
    """Row iterator over ``SELECT *`` of one table through a DB-API connection."""

    def __init__(self, connection: Any, table: str, query: str) -> None:
        self.relation_name = table
        self._connection = connection
        self._cursor = connection.cursor()
        self._cursor.execute(query)
        self.column_names = [column[0] for column in self._cursor.description or ()]

    def __iter__(self) -> Iterator[list[str | None]]:
        for row in self._cursor:
            yield [None if value is None else str(value) for value in row]

    def close(self) -> None:
        self._cursor.close()
        self._connection.close()

    def __enter__(self) -> DbApiRelationalInput:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class FileInputGenerator:
    kinds: ClassVar[frozenset[InputKind]] = frozenset({InputKind.RELATIONAL, InputKind.FILE})

    def __init__(self, setting: FileInputSetting) -> None:
        self.setting = setting
        self._open: list[CsvRelationalInput] = []

    @property
    def path(self) -> Path:
        return Path(self.setting.path)

    def describe(self) -> str:
        return f"file:{self.setting.path}"

    def generate_new_copy(self) -> CsvRelationalInput:
        relational_input = CsvRelationalInput(self.path, self.setting.parsing)
        self._open.append(relational_input)
        return relational_input

    def close(self) -> None:
        while self._open:
            self._open.pop().close()

    def __repr__(self) -> str:
        return f"FileInputGenerator({self.setting.path!r})"


class TableInputGenerator:
    kinds: ClassVar[frozenset[InputKind]] = frozenset({InputKind.RELATIONAL, InputKind.TABLE})

    def __init__(self, setting: TableInputSetting, *, connector: Connector | None = None) -> None:
        self.setting = setting
        self._connector = connector
        self._open: list[DbApiRelationalInput] = []

    @property
    def table(self) -> str:
        return self.setting.table

    def describe(self) -> str:
        return f"table:{self.setting.connection.url}/{self.setting.table}"

    def select_query(self) -> str:
        return f"SELECT * FROM {self.setting.table}"

    def generate_new_copy(self) -> DbApiRelationalInput:
        if self._connector is None:
            raise InputIterationError(f"No database connector configured for {self.describe()}")
        connection = self._connector(self.setting.connection)
        relational_input = DbApiRelationalInput(connection, self.setting.table, self.select_query())
        self._open.append(relational_input)
        return relational_input

    def close(self) -> None:
        while self._open:
            self._open.pop().close()

    def __repr__(self) -> str:
        return f"TableInputGenerator({self.setting.table!r})"


class DatabaseConnectionGenerator:
    kinds: ClassVar[frozenset[InputKind]] = frozenset({InputKind.DATABASE_CONNECTION})

    def __init__(
        self, setting: DatabaseConnectionSetting, *, connector: Connector | None = None
    ) -> None:
        self.setting = setting
        self._connector = connector
        self._connection: Any = None

    def describe(self) -> str:
        return f"connection:{self.setting.url}"

    def connection(self) -> Any:
        """Return the generator's own connection, opening it on first use."""
        if self._connection is None:
            if self._connector is None:
                raise InputIterationError(
                    f"No database connector configured for {self.describe()}"
                )
            self._connection = self._connector(self.setting)
        return self._connection

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __repr__(self) -> str:
        return f"DatabaseConnectionGenerator({self.setting.url!r})"


class HdfsInputGenerator:
    """Descriptor of a distributed-file input; reading it is up to the algorithm."""

    kinds: ClassVar[frozenset[InputKind]] = frozenset({InputKind.HDFS})

    def __init__(self, setting: FileInputSetting) -> None:
        self.setting = setting

    @property
    def uri(self) -> str:
        return self.setting.path

    def describe(self) -> str:
        return f"hdfs:{self.setting.path}"

    def close(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"HdfsInputGenerator({self.setting.path!r})"


InputGenerator = (
    FileInputGenerator | TableInputGenerator | DatabaseConnectionGenerator | HdfsInputGenerator
)


def _csv_dialect(parsing: FileParsingConfig) -> dict[str, Any]:
    """Translate the parsing settings into ``csv.reader`` keyword arguments.

    ``strict_quotes`` only maps to ``strict=True``, which rejects malformed quoting. The
    opencsv behaviour of dropping characters outside the quotes of a field is not reproduced.
    """
    options: dict[str, Any] = {
        "delimiter": parsing.separator,
        "skipinitialspace": parsing.ignore_leading_whitespace,
        "strict": parsing.strict_quotes,
    }
    if parsing.quote == NO_CHARACTER:
        options["quoting"] = csv.QUOTE_NONE
    else:
        options["quotechar"] = parsing.quote
    if parsing.escape != NO_CHARACTER:
        options["escapechar"] = parsing.escape
    return options
