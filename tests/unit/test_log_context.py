import logging

from infrastructure.observability import (
    ContextInjectFilter,
    get_log_context,
    make_run_tag,
    prompt_context,
    set_log_context,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)


def test_run_tag_is_stable_and_short() -> None:
    assert make_run_tag("20260101_120000_domain-eval") == make_run_tag("20260101_120000_domain-eval")
    assert len(make_run_tag("anything")) == 8
    assert make_run_tag("a") != make_run_tag("b")


def test_filter_injects_run_tables_and_prompt() -> None:
    set_log_context(run_id_full="run-1", tables_version="1.0.0/1.0.0")

    with prompt_context(7):
        record = _record()
        assert ContextInjectFilter().filter(record)

    assert record.run == make_run_tag("run-1")
    assert record.tables == "1.0.0/1.0.0"
    assert record.prompt == "0007"


def test_prompt_context_is_restored_after_block() -> None:
    with prompt_context(3):
        with prompt_context(4):
            assert get_log_context()["prompt_idx"] == "0004"
        assert get_log_context()["prompt_idx"] == "0003"
    assert get_log_context()["prompt_idx"] == "-"
