"""Runtime helpers for result persistence."""

from algo_harness.runtime.results_root import resolve_results_root, result_file_path

__all__ = ["resolve_results_root", "result_file_path"]
