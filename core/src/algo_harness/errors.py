"""
Error taxonomy.

Every fatal failure carries the process exit code the command line reports for it.
Capability mismatches and telemetry failures are not errors: they are logged.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    OK = 0
    ARGUMENT_ERROR = 1
    SETUP_FAILURE = 3
    SINK_CLOSE_FAILURE = 4
    NO_COMPATIBLE_CAPABILITY = 5
    EXECUTION_FAILED = 6


class HarnessError(Exception):
    """Base class for all fatal harness errors."""

    exit_code: ExitCode = ExitCode.SETUP_FAILURE


class ConfigError(HarnessError, ValueError):
    """Raised for malformed command line or config file input."""

    exit_code = ExitCode.ARGUMENT_ERROR


class SetupError(HarnessError):
    """Raised when the run cannot be prepared; the algorithm is never executed."""

    exit_code = ExitCode.SETUP_FAILURE


class PluginInstantiationError(SetupError):
    """Raised when the algorithm class cannot be located or constructed."""


class AlgorithmConfigurationError(SetupError, ValueError):
    """Raised by algorithms (or the harness) when a configuration value is rejected."""


class CredentialsParseError(SetupError, ValueError):
    """Raised when a database credentials file cannot be read or parsed."""


class IllegalCharacterError(SetupError, ValueError):
    """Raised when a delimiter token does not denote a single character."""


class InputResolutionError(SetupError):
    """Raised when an input token or indirection file cannot be resolved."""


class OutputResolutionError(SetupError):
    """Raised when the output mode cannot be turned into a result sink."""


class NoCompatibleInputError(HarnessError):
    """Raised when the algorithm accepts none of the inputs the harness can provide."""

    exit_code = ExitCode.NO_COMPATIBLE_CAPABILITY


class SinkCloseError(HarnessError):
    """Raised when the result sink fails to persist its results."""

    exit_code = ExitCode.SINK_CLOSE_FAILURE
