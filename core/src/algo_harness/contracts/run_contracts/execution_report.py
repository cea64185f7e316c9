from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from algo_harness.errors import ExitCode

RunStatus = Literal["ok", "failed"]


class RunPhase(str, Enum):
    """Linear lifecycle of one harness run. There are no back-edges."""

    INIT = "init"
    SINK_BUILT = "sink_built"
    PLUGIN_LOADED = "plugin_loaded"
    CONFIGURED = "configured"
    RUNNING = "running"
    FINALIZED = "finalized"
    SINK_FLUSHED = "sink_flushed"
    REPORTED = "reported"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class ExecutionReport:
    """
    Outcome of a single algorithm execution.

    Handed to the experiment telemetry client and the command line; not retained afterwards.
    """

    status: RunStatus
    elapsed_ms: int
    output_mode: str
    execution_id: str | None = None
    experiment_tags: Sequence[str] = field(default_factory=tuple)

    # Human-readable failure description
    message: str | None = None
    phase: RunPhase = RunPhase.DONE

    @property
    def succeeded(self) -> bool:
        return self.status == "ok"

    @property
    def exit_code(self) -> ExitCode:
        return ExitCode.OK if self.succeeded else ExitCode.EXECUTION_FAILED


def format_duration(millis: int) -> str:
    """Render milliseconds as H:MM:SS.mmm; negative durations render as placeholders."""
    if millis < 0:
        return "-:--:--.---"
    ms = millis % 1000
    seconds_total = millis // 1000
    s = seconds_total % 60
    m = (seconds_total // 60) % 60
    h = seconds_total // 3600
    return f"{h}:{m:02d}:{s:02d}.{ms:03d}"
