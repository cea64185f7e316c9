from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TextIO

from algo_harness.outputs.results import result_kind, result_to_dict
from algo_harness.outputs.store import MetadataStore
from algo_harness.runtime.results_root import result_file_path

logger = logging.getLogger("algo_harness.outputs")


class DiscardingResultReceiver:
    """Drops every result."""

    def accept(self, result: Any) -> None:
        return None

    def close(self) -> None:
        return None


class ResultPrinter:
    """
    Non-caching receiver: every result is written through to its result file on arrival.

    Files are named ``<execution_id>_<kind>s.jsonl`` inside the results root and are only
    created for result kinds that actually occur. A file left by an earlier run with the same
    execution id is replaced, as ResultCache does.
    """

    def __init__(self, execution_id: str, results_root: Path) -> None:
        self.execution_id = execution_id
        self._root = results_root
        self._streams: dict[str, TextIO] = {}

    def accept(self, result: Any) -> None:
        stream = self._stream(result_kind(result))
        stream.write(json.dumps(result_to_dict(result), sort_keys=True, default=str))
        stream.write("\n")
        stream.flush()

    def close(self) -> None:
        streams, self._streams = self._streams, {}
        for stream in streams.values():
            stream.close()

    def _stream(self, kind: str) -> TextIO:
        stream = self._streams.get(kind)
        if stream is None:
            path = result_file_path(self._root, self.execution_id, kind)
            stream = path.open("w", encoding="utf-8")
            self._streams[kind] = stream
        return stream


class ResultCache:
    """
    Append-only in-memory receiver keyed by an execution id.

    fetch_new_results() drains what arrived since the previous fetch; close() persists the
    complete history to the result files regardless of what was fetched, replacing files of an
    earlier run with the same execution id.
    """

    def __init__(self, execution_id: str, results_root: Path) -> None:
        self.execution_id = execution_id
        self._root = results_root
        self._results: list[Any] = []
        self._fetched = 0
        self._closed = False

    @property
    def results(self) -> list[Any]:
        return list(self._results)

    def accept(self, result: Any) -> None:
        self._results.append(result)

    def fetch_new_results(self) -> list[Any]:
        new_results = self._results[self._fetched :]
        self._fetched = len(self._results)
        return new_results

    def close(self) -> None:
        if self._closed:
            return
        by_kind: dict[str, list[Any]] = {}
        for result in self._results:
            by_kind.setdefault(result_kind(result), []).append(result)
        for kind, results in by_kind.items():
            path = result_file_path(self._root, self.execution_id, kind)
            with path.open("w", encoding="utf-8") as handle:
                for result in results:
                    handle.write(json.dumps(result_to_dict(result), sort_keys=True, default=str))
                    handle.write("\n")
            logger.info("Stored %d %s result(s) in %s", len(results), kind, path)
        self._closed = True


class MetadataStoreResultReceiver:
    """Writes results into one schema of an external metadata store."""

    def __init__(self, store: MetadataStore, schema: str) -> None:
        self.store = store
        self.schema = schema

    def accept(self, result: Any) -> None:
        self.store.add_result(self.schema, result_to_dict(result))

    def flush(self) -> None:
        self.store.flush()

    def close(self) -> None:
        self.store.close()
