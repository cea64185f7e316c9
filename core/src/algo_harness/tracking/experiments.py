from __future__ import annotations

import logging
from collections.abc import Mapping

from algo_harness.contracts.run_contracts.execution_report import ExecutionReport
from algo_harness.contracts.tracking import TrackingClient

logger = logging.getLogger("algo_harness.telemetry")


def experiment_labels(experiment_key: str, report: ExecutionReport) -> dict[str, str]:
    labels = {f"tag.{tag}": "true" for tag in report.experiment_tags}
    labels["experiment_key"] = experiment_key
    labels["output_mode"] = report.output_mode
    if report.execution_id:
        labels["execution_id"] = report.execution_id
    return labels


def append_experiment(
    tracking: TrackingClient,
    *,
    experiment_key: str,
    report: ExecutionReport,
    configuration: Mapping[str, str],
) -> bool:
    """
    Append one measurement to the experiment store.

    Telemetry never affects the run outcome: failures are logged and reported as False.
    """
    try:
        tracking.open_measurement(experiment_key, labels=experiment_labels(experiment_key, report))
    except Exception:
        logger.warning("Failed to open measurement for %s", experiment_key, exc_info=True)
        return False

    try:
        tracking.record_configuration(configuration)
        tracking.record_elapsed(report.elapsed_ms)
        return True
    except Exception:
        logger.warning("Failed to append experiment data for %s", experiment_key, exc_info=True)
        return False
    finally:
        try:
            tracking.close_measurement(status=report.status)
        except Exception:
            logger.warning("Failed to close measurement for %s", experiment_key, exc_info=True)
