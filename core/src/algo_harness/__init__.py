"""Command-line harness that configures and runs a single data-profiling algorithm."""

__version__ = "0.1.0"
