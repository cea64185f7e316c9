"""Result sinks and the output-mode grammar that selects them."""

from algo_harness.outputs.receivers import (
    DiscardingResultReceiver,
    MetadataStoreResultReceiver,
    ResultCache,
    ResultPrinter,
)
from algo_harness.outputs.resolver import OutputPlan, generate_execution_id, resolve_output
from algo_harness.outputs.store import JsonMetadataStore, MetadataStore

__all__ = [
    "DiscardingResultReceiver",
    "MetadataStoreResultReceiver",
    "ResultCache",
    "ResultPrinter",
    "OutputPlan",
    "generate_execution_id",
    "resolve_output",
    "JsonMetadataStore",
    "MetadataStore",
]
