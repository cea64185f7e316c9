"""
Output mode grammar.

    none                      discard everything
    print                     cache, echo the cached results when the run ends
    file | file:<id>          cache, persist on close
    file! | file!:<id>        write results through as they arrive
    crate:<locator>:<scope>   append into scope <scope> of the metadata store at <locator>

Mode words are case-insensitive. Unknown modes fall back to ``file``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Literal

from algo_harness.contracts.algorithm_contracts.results import ResultReceiver
from algo_harness.errors import OutputResolutionError
from algo_harness.outputs.receivers import (
    DiscardingResultReceiver,
    MetadataStoreResultReceiver,
    ResultCache,
    ResultPrinter,
)
from algo_harness.outputs.store import JsonMetadataStore
from algo_harness.runtime.results_root import resolve_results_root

logger = logging.getLogger("algo_harness.outputs.resolver")

OutputMode = Literal["none", "print", "file", "file!", "crate"]

EXECUTION_ID_FORMAT = "%Y-%m-%d_%H-%M-%S"


@dataclass(frozen=True, slots=True)
class OutputPlan:
    """Everything needed to build the result sink of one run."""

    token: str
    mode: OutputMode
    is_caching: bool
    execution_id: str | None = None
    store_locator: str | None = None
    scope: str | None = None
    results_dir: str | None = None

    @property
    def requested_prefix(self) -> str:
        """Mode word as the operator typed it, used to pick the terminal sink action."""
        return self.token.split(":", 1)[0].lower()

    def build(self) -> ResultReceiver:
        if self.mode == "none":
            return DiscardingResultReceiver()
        if self.mode == "crate":
            if not self.store_locator or not self.scope:
                raise OutputResolutionError(
                    f"Output mode {self.token!r} must look like crate:<locator>:<scope>"
                )
            store = JsonMetadataStore.open(self.store_locator)
            if not store.has_schema(self.scope):
                raise OutputResolutionError(
                    f"Schema {self.scope!r} does not exist in metadata store {self.store_locator}"
                )
            return MetadataStoreResultReceiver(store, self.scope)

        if not self.execution_id:
            raise OutputResolutionError(f"Output mode {self.token!r} has no execution id")
        try:
            root = resolve_results_root(self.results_dir)
        except RuntimeError as exc:
            raise OutputResolutionError(str(exc)) from exc
        if self.is_caching:
            return ResultCache(self.execution_id, root)
        return ResultPrinter(self.execution_id, root)


def generate_execution_id(now: datetime | None = None) -> str:
    return (now or datetime.now()).strftime(EXECUTION_ID_FORMAT)


def resolve_output(
    token: str,
    *,
    results_dir: str | Path | None = None,
    now: datetime | None = None,
) -> OutputPlan:
    token = token.strip()
    lowered = token.lower()
    results = str(results_dir) if results_dir is not None else None

    if lowered == "none":
        return OutputPlan(token=token, mode="none", is_caching=False)

    if lowered.startswith("crate:"):
        locator, sep, scope = token[len("crate:") :].rpartition(":")
        if not sep or not locator or not scope:
            raise OutputResolutionError(
                f"Output mode {token!r} must look like crate:<locator>:<scope>"
            )
        return OutputPlan(
            token=token,
            mode="crate",
            is_caching=False,
            store_locator=locator,
            scope=scope,
        )

    if lowered == "print":
        mode: OutputMode = "print"
        caching, execution_id = True, None
    elif lowered == "file":
        mode, caching, execution_id = "file", True, None
    elif lowered.startswith("file:"):
        mode, caching, execution_id = "file", True, token[len("file:") :]
    elif lowered == "file!":
        mode, caching, execution_id = "file!", False, None
    elif lowered.startswith("file!:"):
        mode, caching, execution_id = "file!", False, token[len("file!:") :]
    else:
        logger.warning('Unknown output mode "%s". Defaulting to "file"', token)
        mode, caching, execution_id = "file", True, None

    return OutputPlan(
        token=token,
        mode=mode,
        is_caching=caching,
        execution_id=execution_id or generate_execution_id(now),
        results_dir=results,
    )
