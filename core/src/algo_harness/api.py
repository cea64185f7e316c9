from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import replace

from algo_harness.capabilities import (
    Capability,
    PluginHandle,
    apply_configuration,
    apply_experiment_metadata,
    apply_inputs,
    apply_result_sink,
    apply_temp_files,
    parse_configuration_item,
)
from algo_harness.configuration import RunParameters
from algo_harness.contracts import (
    ExecutionReport,
    ExperimentMetadata,
    PluginRegistry,
    ResultReceiver,
)
from algo_harness.contracts.run_contracts import RunPhase, RunStatus, format_duration
from algo_harness.contracts.tracking import TrackingClient
from algo_harness.errors import (
    AlgorithmConfigurationError,
    HarnessError,
    NoCompatibleInputError,
    OutputResolutionError,
    SinkCloseError,
)
from algo_harness.inputs import (
    FileParsingConfig,
    InputGenerator,
    InputKind,
    InputResolver,
    InputSpec,
    load_pgpass,
)
from algo_harness.outputs import (
    MetadataStoreResultReceiver,
    OutputPlan,
    ResultCache,
    resolve_output,
)
from algo_harness.tempfiles import TempFileGenerator
from algo_harness.tracking import MlflowTrackingClient, append_experiment

logger = logging.getLogger("algo_harness.run")

Console = Callable[[str], None]

FILE_INPUT_PREFERENCE = (InputKind.RELATIONAL, InputKind.FILE, InputKind.HDFS)
DATABASE_INPUT_PREFERENCE = (
    InputKind.RELATIONAL,
    InputKind.TABLE,
    InputKind.DATABASE_CONNECTION,
)


def run_algorithm(
    parameters: RunParameters,
    *,
    registry: PluginRegistry,
    tracking: TrackingClient | None = None,
    input_resolver: InputResolver | None = None,
    console: Console = print,
) -> ExecutionReport:
    """
    Configure and run one algorithm.

    Setup failures raise HarnessError subclasses before execute() is attempted. A crashing
    algorithm never raises: it yields a failed report after cleanup, sink close and telemetry.
    """
    logger.info("Initializing algorithm %s", parameters.algorithm)

    plan, sink = _build_sink(parameters)
    logger.debug("Reached phase %s", RunPhase.SINK_BUILT.value)

    handle = PluginHandle.discover(registry.create(parameters.algorithm))
    logger.debug("Reached phase %s", RunPhase.PLUGIN_LOADED.value)

    resolver = input_resolver or InputResolver()
    generators: list[InputGenerator] = []
    temp_files: TempFileGenerator | None = None
    try:
        _configure_values(handle, parameters.algorithm_config)
        generators = _configure_inputs(handle, parameters, resolver)
        apply_result_sink(handle, sink)
        if handle.supports(Capability.TEMP_FILES):
            temp_files = TempFileGenerator(parameters.temp_dir, cleanup=parameters.clear_temp)
            apply_temp_files(handle, temp_files)
        apply_experiment_metadata(
            handle,
            ExperimentMetadata(
                experiment_key=parameters.experiment,
                execution_id=plan.execution_id,
                tags=tuple(parameters.experiment_tags),
                configuration=parameters.telemetry_configuration(),
            ),
        )
    except Exception as exc:
        _release(generators, temp_files)
        if isinstance(exc, HarnessError):
            raise
        raise AlgorithmConfigurationError(f"Could not initialize algorithm: {exc}") from exc
    logger.debug("Reached phase %s", RunPhase.CONFIGURED.value)

    status: RunStatus = "ok"
    message: str | None = None
    flush_error: Exception | None = None
    start = time.monotonic()
    try:
        logger.debug("Reached phase %s", RunPhase.RUNNING.value)
        handle.execute()
    except Exception as exc:
        logger.error("Algorithm crashed.", exc_info=True)
        status = "failed"
        message = f"{type(exc).__name__}: {exc}"
    finally:
        if isinstance(sink, MetadataStoreResultReceiver):
            try:
                sink.flush()
            except Exception as exc:
                logger.error("Flushing the metadata store failed.", exc_info=True)
                flush_error = exc
        _release(generators, temp_files)
        elapsed_ms = int((time.monotonic() - start) * 1000)
        console(f"Elapsed time: {format_duration(elapsed_ms)}.")
    logger.debug("Reached phase %s", RunPhase.FINALIZED.value)

    report = ExecutionReport(
        status=status,
        elapsed_ms=elapsed_ms,
        output_mode=plan.mode,
        execution_id=plan.execution_id,
        experiment_tags=tuple(parameters.experiment_tags),
        message=message,
        phase=RunPhase.FINALIZED,
    )

    if flush_error is not None:
        raise SinkCloseError(f"Storing the result failed: {flush_error}") from flush_error
    _finish_sink(plan, sink, console)
    logger.debug("Reached phase %s", RunPhase.SINK_FLUSHED.value)

    if parameters.experiment is not None:
        _report_experiment(parameters.experiment, parameters, report, tracking)
    logger.debug("Reached phase %s", RunPhase.REPORTED.value)

    return replace(report, phase=RunPhase.DONE)


def _build_sink(parameters: RunParameters) -> tuple[OutputPlan, ResultReceiver]:
    try:
        plan = resolve_output(parameters.output, results_dir=parameters.results_dir)
        return plan, plan.build()
    except HarnessError:
        raise
    except Exception as exc:
        raise OutputResolutionError(f"Could not create result receiver: {exc}") from exc


def _configure_values(handle: PluginHandle, items: Sequence[str]) -> None:
    for item in items:
        key, value = parse_configuration_item(item)
        apply_configuration(handle, key, value)


def _configure_inputs(
    handle: PluginHandle,
    parameters: RunParameters,
    resolver: InputResolver,
) -> list[InputGenerator]:
    if parameters.db_connection is not None:
        # Inputs are database tables.
        credentials = load_pgpass(parameters.db_connection, parameters.db_type)
        parsing = FileParsingConfig()
        preference = DATABASE_INPUT_PREFERENCE
    else:
        credentials = None
        parsing = parameters.file_parsing_config()
        preference = FILE_INPUT_PREFERENCE

    supported = [kind for kind in preference if handle.supports_input(kind)]
    if not supported:
        raise NoCompatibleInputError(
            "Algorithm does not implement a supported input method "
            f"({'/'.join(kind.value for kind in preference)})."
        )

    specs = [InputSpec(token, parsing, credentials) for token in parameters.inputs]
    for kind in supported:
        generators = resolver.resolve_all(specs, kind)
        if generators:
            apply_inputs(handle, parameters.input_key, generators, kind)
            logger.info("Configured %d %s input(s)", len(generators), kind.value)
            return generators

    raise NoCompatibleInputError(
        f"None of the inputs can be served as {'/'.join(kind.value for kind in supported)} input."
    )


def _release(generators: Sequence[InputGenerator], temp_files: TempFileGenerator | None) -> None:
    for generator in generators:
        try:
            generator.close()
        except Exception:
            logger.warning("Failed to close input %s", generator.describe(), exc_info=True)
    if temp_files is not None:
        try:
            temp_files.close()
        except Exception:
            logger.warning("Failed to release temp files", exc_info=True)


def _finish_sink(plan: OutputPlan, sink: ResultReceiver, console: Console) -> None:
    """Terminal sink action, chosen by the requested mode word rather than the sink type."""
    prefix = plan.requested_prefix
    if prefix == "none":
        return
    if prefix == "print" and isinstance(sink, ResultCache):
        console("Results:")
        for result in sink.fetch_new_results():
            console(str(result))
    try:
        sink.close()
    except Exception as exc:
        logger.error("Storing the result failed.", exc_info=True)
        raise SinkCloseError(f"Storing the result failed: {exc}") from exc


def _report_experiment(
    experiment_key: str,
    parameters: RunParameters,
    report: ExecutionReport,
    tracking: TrackingClient | None,
) -> None:
    if tracking is None:
        try:
            tracking = MlflowTrackingClient(
                tracking_uri=parameters.tracking_uri,
                experiment_name=experiment_key,
            )
        except Exception:
            logger.warning("Experiment telemetry unavailable", exc_info=True)
            return
    append_experiment(
        tracking,
        experiment_key=experiment_key,
        report=report,
        configuration=parameters.telemetry_configuration(),
    )
