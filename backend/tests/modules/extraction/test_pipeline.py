from datetime import datetime, timedelta, timezone

import pytest

from bill_extractor.modules.extraction.exceptions import InvocationError, ParseError
from bill_extractor.modules.extraction.pipeline import ExtractionPipeline, ModelRun
from bill_extractor.modules.extraction.schemas import ModelExtractionResult, ModelRunState


def _ticking_clock(step_ms: int = 250):
    current = [datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)]

    def _now() -> datetime:
        value = current[0]
        current[0] = value + timedelta(milliseconds=step_ms)
        return value

    return _now


def test_run_model_walks_success_states(pipeline, llm_registry):
    llm_registry.add("gpt-4o", reply='{"BillNo": "9"}')
    run = ModelRun(model="gpt-4o")

    result = pipeline.run_model("bill text", "gpt-4o", run)

    assert run.history == [
        ModelRunState.PENDING,
        ModelRunState.INVOKING,
        ModelRunState.PARSING,
        ModelRunState.PRICED,
        ModelRunState.DONE,
    ]
    assert result.data == {"BillNo": "9"}
    assert result.pricing.available is True


def test_prompt_embeds_extracted_text(pipeline, llm_registry):
    llm = llm_registry.add("gpt-4o")

    pipeline.run_model("CONSUMER NAME: A. SHARMA", "gpt-4o")

    user_message = llm.calls[0]["messages"][1]["content"]
    assert user_message.endswith("CONSUMER NAME: A. SHARMA")


def test_single_model_errors_propagate(pipeline, llm_registry):
    llm_registry.add("gpt-4o", reply="not json at all")

    with pytest.raises(ParseError):
        pipeline.extract("bill text", "gpt-4o")


def test_single_model_defaults_to_configured_model(pipeline, llm_registry):
    llm_registry.add("gpt-4o")

    result = pipeline.extract("bill text")

    assert result.model == "gpt-4o"


def test_compare_keeps_partial_failures_in_order(invoker, llm_registry):
    llm_registry.add("gpt-4o", reply='{"BillNo": "1"}')
    llm_registry.add("o3-mini", error=RuntimeError("Error code: 500"))
    llm_registry.add("gpt-4o-mini", reply='{"BillNo": "3"}')
    pipeline = ExtractionPipeline(invoker=invoker, clock=_ticking_clock())

    results = pipeline.compare("bill text", ["gpt-4o", "o3-mini", "gpt-4o-mini"])

    assert [r.model for r in results] == ["gpt-4o", "o3-mini", "gpt-4o-mini"]
    assert results[0].data == {"BillNo": "1"}
    assert results[2].data == {"BillNo": "3"}
    failed = results[1]
    assert failed.data is None
    assert failed.usage is None
    assert failed.pricing is None
    assert "o3-mini" in failed.error
    assert "Error code: 500" in failed.error
    assert all(r.timing is not None for r in results)


def test_compare_runs_models_strictly_one_after_another(pipeline, llm_registry):
    for model in ("gpt-4o", "o3-mini", "gpt-4o-mini"):
        llm_registry.add(model)

    pipeline.compare("bill text", ["gpt-4o", "o3-mini", "gpt-4o-mini"])

    assert llm_registry.events == [
        ("start", "gpt-4o"),
        ("end", "gpt-4o"),
        ("start", "o3-mini"),
        ("end", "o3-mini"),
        ("start", "gpt-4o-mini"),
        ("end", "gpt-4o-mini"),
    ]


def test_compare_waits_for_retries_before_next_model(pipeline, llm_registry):
    llm_registry.add("gpt-4o", error=ConnectionError("timeout"), failures=1)
    llm_registry.add("o3-mini")

    results = pipeline.compare("bill text", ["gpt-4o", "o3-mini"])

    assert [event[1] for event in llm_registry.events] == [
        "gpt-4o",
        "gpt-4o",
        "gpt-4o",
        "gpt-4o",
        "o3-mini",
        "o3-mini",
    ]
    assert results[0].error is None


def test_compare_records_timing(invoker, llm_registry):
    llm_registry.add("gpt-4o")
    pipeline = ExtractionPipeline(invoker=invoker, clock=_ticking_clock(step_ms=250))

    (result,) = pipeline.compare("bill text", ["gpt-4o"])

    assert result.timing.started_at == "2025-03-01T12:00:00+00:00"
    assert result.timing.finished_at == "2025-03-01T12:00:00.250000+00:00"
    assert result.timing.duration_ms == 250.0


def test_compare_records_unconfigured_model_as_failure(pipeline, llm_registry):
    llm_registry.add("gpt-4o")

    results = pipeline.compare("bill text", ["claude-3-5-haiku-latest", "gpt-4o"])

    assert results[0].error.startswith("claude-3-5-haiku-latest:")
    assert results[1].error is None


def test_model_run_records_failure_stage():
    run = ModelRun(model="gpt-4o")
    run.advance(ModelRunState.INVOKING)
    run.advance(ModelRunState.PARSING)

    run.fail()

    assert run.state is ModelRunState.FAILED
    assert run.failed_at is ModelRunState.PARSING


def test_model_run_rejects_transitions_after_terminal_state():
    run = ModelRun(model="gpt-4o")
    run.advance(ModelRunState.INVOKING)
    run.fail()

    with pytest.raises(RuntimeError):
        run.advance(ModelRunState.PARSING)


def test_invocation_failure_is_marked_at_invoking_stage(pipeline, llm_registry):
    llm_registry.add("gpt-4o", error=RuntimeError("boom"))
    run = ModelRun(model="gpt-4o")

    with pytest.raises(InvocationError):
        pipeline.run_model("bill text", "gpt-4o", run)

    assert run.state is ModelRunState.INVOKING


def test_result_serialization_omits_error_only_when_absent():
    ok = ModelExtractionResult(model="gpt-4o", data={"BillNo": "1"})
    failed = ModelExtractionResult(model="o3-mini", error="o3-mini: boom")

    assert "error" not in ok.model_dump(mode="json")
    assert failed.model_dump(mode="json")["error"] == "o3-mini: boom"
