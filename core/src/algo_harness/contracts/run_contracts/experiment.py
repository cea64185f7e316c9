from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ExperimentMetadata:
    """Experiment context handed to algorithms that want to label their own output."""

    experiment_key: str | None
    execution_id: str | None
    tags: Sequence[str] = field(default_factory=tuple)
    configuration: Mapping[str, str] = field(default_factory=dict)
