from .algorithm_contracts import (
    Algorithm,
    PluginNotFoundError,
    PluginRegistry,
    ResultReceiver,
)
from .run_contracts import (
    ExecutionReport,
    ExperimentMetadata,
    RunPhase,
    RunStatus,
)
from .tracking import TrackingClient

__all__ = [
    "Algorithm",
    "PluginRegistry",
    "PluginNotFoundError",
    "ResultReceiver",
    "ExecutionReport",
    "ExperimentMetadata",
    "RunPhase",
    "RunStatus",
    "TrackingClient",
]
