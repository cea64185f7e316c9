from .experiments import append_experiment, experiment_labels
from .fakes import FakeTrackingClient, Measurement
from .mlflow_client import MlflowTrackingClient

__all__ = [
    "FakeTrackingClient",
    "Measurement",
    "MlflowTrackingClient",
    "append_experiment",
    "experiment_labels",
]
