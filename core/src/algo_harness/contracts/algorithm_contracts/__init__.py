from .algorithm import (
    Algorithm,
    BooleanParameterAlgorithm,
    ExperimentMetadataAlgorithm,
    IntegerParameterAlgorithm,
    StringParameterAlgorithm,
    TempFileAlgorithm,
)
from .inputs import (
    DatabaseConnectionParameterAlgorithm,
    FileInputParameterAlgorithm,
    HdfsInputParameterAlgorithm,
    RelationalInputParameterAlgorithm,
    TableInputParameterAlgorithm,
)
from .registry import PluginNotFoundError, PluginRegistry
from .results import (
    BasicStatisticsAlgorithm,
    FunctionalDependencyAlgorithm,
    InclusionDependencyAlgorithm,
    MultivaluedDependencyAlgorithm,
    OrderDependencyAlgorithm,
    ResultReceiver,
    UniqueColumnCombinationsAlgorithm,
)

__all__ = [
    "Algorithm",
    "BooleanParameterAlgorithm",
    "IntegerParameterAlgorithm",
    "StringParameterAlgorithm",
    "TempFileAlgorithm",
    "ExperimentMetadataAlgorithm",
    "RelationalInputParameterAlgorithm",
    "FileInputParameterAlgorithm",
    "TableInputParameterAlgorithm",
    "HdfsInputParameterAlgorithm",
    "DatabaseConnectionParameterAlgorithm",
    "ResultReceiver",
    "FunctionalDependencyAlgorithm",
    "InclusionDependencyAlgorithm",
    "UniqueColumnCombinationsAlgorithm",
    "BasicStatisticsAlgorithm",
    "OrderDependencyAlgorithm",
    "MultivaluedDependencyAlgorithm",
    "PluginRegistry",
    "PluginNotFoundError",
]
