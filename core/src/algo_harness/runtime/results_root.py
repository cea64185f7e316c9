from __future__ import annotations

import os
import tempfile
from pathlib import Path

_ENV_RESULTS_ROOT = "ALGO_HARNESS_RESULTS_DIR"
_LOCAL_RESULTS_DIRNAME = "results"
_TEMP_RESULTS_DIRNAME = "algo-harness-results"


def resolve_results_root(explicit: str | Path | None = None) -> Path:
    """Resolve a writable directory for persisted result files and ensure it exists."""
    candidates: list[Path] = []

    if explicit is not None:
        candidates.append(Path(explicit).expanduser())

    env_value = os.environ.get(_ENV_RESULTS_ROOT)
    if env_value:
        candidates.append(Path(env_value).expanduser())

    candidates.append(Path.cwd() / _LOCAL_RESULTS_DIRNAME)
    candidates.append(Path(tempfile.gettempdir()) / _TEMP_RESULTS_DIRNAME)

    for candidate in candidates:
        if _ensure_writable_dir(candidate):
            return candidate

    raise RuntimeError("Unable to resolve a writable results directory.")


def result_file_path(root: Path, execution_id: str, kind: str) -> Path:
    return root / f"{execution_id}_{kind}s.jsonl"


def _ensure_writable_dir(path: Path) -> bool:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError:
        return False

    return _validate_writable(path)


def _validate_writable(path: Path) -> bool:
    test_file = path / ".write_test"
    try:
        with test_file.open("w", encoding="utf-8") as handle:
            handle.write("ok")
        test_file.unlink(missing_ok=True)
        return True
    except OSError:
        return False
