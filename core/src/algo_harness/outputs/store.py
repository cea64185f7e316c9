"""
External metadata store.

The store is operator-managed: schemas are created outside the harness and a run only
appends results into one existing schema.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from algo_harness.errors import OutputResolutionError

logger = logging.getLogger("algo_harness.outputs.store")


@runtime_checkable
class MetadataStore(Protocol):
    def has_schema(self, name: str) -> bool: ...

    def add_result(self, schema: str, payload: Mapping[str, Any]) -> None: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...


class JsonMetadataStore:
    """Metadata store kept in a single JSON document ``{"schemas": {name: {"results": [...]}}}``."""

    def __init__(self, path: Path, document: dict[str, Any]) -> None:
        self._path = path
        self._document = document
        self._dirty = False
        self._closed = False

    @classmethod
    def open(cls, locator: str | Path) -> JsonMetadataStore:
        path = Path(locator)
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise OutputResolutionError(f"Could not open metadata store {locator}: {exc}") from exc
        if not isinstance(document, dict) or not isinstance(document.get("schemas"), dict):
            raise OutputResolutionError(f"Metadata store {locator} has no 'schemas' mapping")
        return cls(path, document)

    @property
    def path(self) -> Path:
        return self._path

    def schema_names(self) -> list[str]:
        return sorted(self._document["schemas"])

    def has_schema(self, name: str) -> bool:
        return name in self._document["schemas"]

    def results(self, schema: str) -> list[dict[str, Any]]:
        return list(self._schema(schema).get("results", []))

    def add_result(self, schema: str, payload: Mapping[str, Any]) -> None:
        if self._closed:
            raise RuntimeError("Metadata store is closed.")
        self._schema(schema).setdefault("results", []).append(dict(payload))
        self._dirty = True

    def flush(self) -> None:
        if not self._dirty:
            return
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(self._document, handle, indent=2, sort_keys=True, default=str)
        os.replace(tmp_path, self._path)
        self._dirty = False
        logger.debug("Flushed metadata store %s", self._path)

    def close(self) -> None:
        if self._closed:
            return
        self.flush()
        self._closed = True

    def _schema(self, name: str) -> dict[str, Any]:
        try:
            return self._document["schemas"][name]
        except KeyError:
            raise OutputResolutionError(f"Unknown schema {name!r} in {self._path}") from None
