from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from algo_harness.inputs.codec import NO_CHARACTER


class InputKind(str, Enum):
    RELATIONAL = "relational"
    FILE = "file"
    TABLE = "table"
    HDFS = "hdfs"
    DATABASE_CONNECTION = "database_connection"


class DbSystem(str, Enum):
    POSTGRESQL = "PostgreSQL"
    MYSQL = "MySQL"


class FileParsingConfig(BaseModel):
    """Parsing options shared by every file input of one run. Delimiters are decoded characters."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    separator: str = ";"
    quote: str = '"'
    escape: str = NO_CHARACTER
    skip_lines: int = Field(default=0, ge=0)
    strict_quotes: bool = False
    ignore_leading_whitespace: bool = False
    header: bool = False
    skip_differing_lines: bool = False
    null_string: str = ""

    @field_validator("separator", "quote", "escape")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("delimiters must be exactly one character")
        return value


class DatabaseConnectionSetting(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    url: str
    user: str
    password: str = Field(repr=False)
    system: DbSystem = DbSystem.POSTGRESQL
    host: str
    port: str
    database: str


class FileInputSetting(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str
    parsing: FileParsingConfig = Field(default_factory=FileParsingConfig)


class TableInputSetting(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    table: str
    connection: DatabaseConnectionSetting
