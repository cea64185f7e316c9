import json
import logging
import re
from datetime import datetime

import pytest

from algo_harness.errors import OutputResolutionError
from algo_harness.outputs import (
    DiscardingResultReceiver,
    MetadataStoreResultReceiver,
    OutputPlan,
    ResultCache,
    ResultPrinter,
    generate_execution_id,
    resolve_output,
)

_TIMESTAMP = re.compile(r"\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}")


def test_file_with_explicit_execution_id(tmp_path):
    plan = resolve_output("file:run42", results_dir=tmp_path)

    assert plan.mode == "file"
    assert plan.is_caching
    assert plan.execution_id == "run42"
    assert isinstance(plan.build(), ResultCache)


def test_file_without_id_uses_timestamp():
    plan = resolve_output("file")

    assert _TIMESTAMP.fullmatch(plan.execution_id)


def test_empty_id_after_colon_falls_back_to_timestamp():
    now = datetime(2024, 3, 1, 8, 5, 9)

    plan = resolve_output("file:", now=now)

    assert plan.execution_id == "2024-03-01_08-05-09"
    assert generate_execution_id(now) == "2024-03-01_08-05-09"


def test_none_discards():
    plan = resolve_output("none")

    assert plan.mode == "none"
    assert plan.execution_id is None
    assert isinstance(plan.build(), DiscardingResultReceiver)


def test_print_caches(tmp_path):
    plan = resolve_output("print", results_dir=tmp_path)

    assert plan.mode == "print"
    assert plan.is_caching
    assert isinstance(plan.build(), ResultCache)


def test_bang_mode_writes_through(tmp_path):
    plan = resolve_output("file!:stream", results_dir=tmp_path)

    assert plan.mode == "file!"
    assert not plan.is_caching
    assert plan.execution_id == "stream"
    assert isinstance(plan.build(), ResultPrinter)


def test_mode_words_are_case_insensitive(tmp_path):
    plan = resolve_output("FILE:Run7", results_dir=tmp_path)

    assert plan.mode == "file"
    assert plan.execution_id == "Run7"
    assert plan.requested_prefix == "file"


def test_unknown_mode_defaults_to_file(caplog):
    with caplog.at_level(logging.WARNING, logger="algo_harness.outputs.resolver"):
        plan = resolve_output("xml:report")

    assert plan.mode == "file"
    assert plan.is_caching
    assert _TIMESTAMP.fullmatch(plan.execution_id)
    assert plan.requested_prefix == "xml"
    assert 'Unknown output mode "xml:report". Defaulting to "file"' in caplog.text


def test_crate_splits_on_last_colon(tmp_path):
    store = tmp_path / "meta.json"
    store.write_text(json.dumps({"schemas": {"profiling": {}}}), encoding="utf-8")

    plan = resolve_output(f"crate:{store}:profiling")

    assert plan.mode == "crate"
    assert plan.store_locator == str(store)
    assert plan.scope == "profiling"
    receiver = plan.build()
    assert isinstance(receiver, MetadataStoreResultReceiver)
    assert receiver.schema == "profiling"


def test_crate_with_missing_scope_fails_on_build(tmp_path):
    store = tmp_path / "meta.json"
    store.write_text(json.dumps({"schemas": {}}), encoding="utf-8")

    plan = resolve_output(f"crate:{store}:profiling")

    with pytest.raises(OutputResolutionError, match="does not exist"):
        plan.build()


def test_malformed_crate_token_is_rejected():
    with pytest.raises(OutputResolutionError, match="crate:<locator>:<scope>"):
        resolve_output("crate:only-locator")


def test_incomplete_plans_fail_on_build_with_resolution_errors(tmp_path):
    crate = OutputPlan(token="crate:x", mode="crate", is_caching=False)
    unnamed = OutputPlan(token="file", mode="file", is_caching=True, results_dir=str(tmp_path))

    with pytest.raises(OutputResolutionError, match="crate:<locator>:<scope>"):
        crate.build()
    with pytest.raises(OutputResolutionError, match="no execution id"):
        unnamed.build()
