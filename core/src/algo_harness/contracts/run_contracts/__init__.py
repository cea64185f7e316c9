from .execution_report import ExecutionReport, RunPhase, RunStatus, format_duration
from .experiment import ExperimentMetadata

__all__ = [
    "ExecutionReport",
    "ExperimentMetadata",
    "RunPhase",
    "RunStatus",
    "format_duration",
]
