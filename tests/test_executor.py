"""Tests for core.executor: payload normalization, size cap and retries."""

import json

import pytest

from core.errors import ExternalAgentError, HistorianOutputInvalidError, ResponseTooLargeError
from core.executor import RetryPolicy, StageExecutor, normalize_historian, render_structured
from core.state import HistorianOutput
from utils.llm import AgentReply, parse_reply


def _executor(reply, **kwargs):
    return StageExecutor(reasoner=lambda role, system, user: reply, **kwargs)


# ---------------------------------------------------------------------------
# Historian normalization
# ---------------------------------------------------------------------------

class TestNormalizeHistorian:
    def test_labeled_sections(self):
        out = normalize_historian(AgentReply("Summary: Use Postgres.\n\nRationale: Strong consistency."))
        assert out == HistorianOutput("Use Postgres.", "Strong consistency.")

    def test_labels_are_case_insensitive(self):
        out = normalize_historian(AgentReply("SUMMARY: A\nrationale: B"))
        assert (out.decision_summary, out.decision_rationale) == ("A", "B")

    def test_multiline_rationale_kept(self):
        text = "Summary: Adopt queues.\n\nRationale: First reason.\n\nSecond reason."
        out = normalize_historian(AgentReply(text))
        assert out.decision_rationale == "First reason.\n\nSecond reason."

    def test_preamble_before_labels(self):
        text = "Here is my decision.\nSummary: Ship it.\nRationale: Low risk."
        out = normalize_historian(AgentReply(text))
        assert out.decision_summary == "Ship it."

    def test_unlabeled_text_falls_back(self):
        text = "x" * 600
        out = normalize_historian(AgentReply(text))
        assert out.decision_summary == "x" * 500
        assert out.decision_rationale == text

    def test_fallback_trims(self):
        out = normalize_historian(AgentReply("  Keep the monolith.  \n"))
        assert out.decision_summary == "Keep the monolith."
        assert out.decision_rationale == "Keep the monolith."

    def test_fallback_chars_override(self):
        out = normalize_historian(AgentReply("abcdefghij"), fallback_chars=4)
        assert out.decision_summary == "abcd"

    def test_structured_fields(self):
        reply = parse_reply(json.dumps({"decisionSummary": " A ", "decisionRationale": "B"}))
        assert normalize_historian(reply) == HistorianOutput("A", "B")

    def test_structured_short_field_names(self):
        reply = AgentReply(text="{}", data={"summary": "A", "rationale": "B"})
        assert normalize_historian(reply) == HistorianOutput("A", "B")

    def test_structured_empty_rationale_rejected(self):
        reply = AgentReply(text="{}", data={"decisionSummary": "A", "decisionRationale": ""})
        with pytest.raises(HistorianOutputInvalidError):
            normalize_historian(reply)

    def test_structured_missing_summary_rejected(self):
        reply = AgentReply(text="{}", data={"decisionRationale": "B"})
        with pytest.raises(HistorianOutputInvalidError):
            normalize_historian(reply)

    def test_structured_without_decision_fields_falls_back(self):
        text = '{"notes": "keep it simple"}'
        out = normalize_historian(parse_reply(text))
        assert out.decision_rationale == text

    def test_invalid_output_names_historian_stage(self):
        reply = AgentReply(text="{}", data={"summary": "", "rationale": ""})
        with pytest.raises(HistorianOutputInvalidError) as exc:
            normalize_historian(reply)
        assert exc.value.stage == "historian"


# ---------------------------------------------------------------------------
# Structured rendering for stages 1-3
# ---------------------------------------------------------------------------

def test_render_known_fields():
    data = {"insights": "Main point", "keyPoints": ["one", "two"]}
    assert render_structured(data) == "Main point\n\n• one\n• two"


def test_render_keeps_extra_fields_after_known_ones():
    data = {"analysis": "Overview", "risks": ["SPOF in cache", "no auth"], "confidence": 0.7}
    text = render_structured(data)
    assert text.startswith("Overview")
    assert "risks:\n• SPOF in cache\n• no auth" in text
    assert "confidence:\n0.7" in text


def test_render_skips_empty_extra_fields():
    assert render_structured({"insights": "Main point", "notes": ""}) == "Main point"


def test_execute_passes_extra_fields_downstream():
    reply = {"analysis": "Overview", "risks": ["SPOF in cache", "no auth"]}
    out = _executor(reply).execute("analysis", "sys", "user")
    assert "Overview" in out
    assert "SPOF in cache" in out and "no auth" in out


def test_render_unknown_fields_as_json():
    data = {"other": 1}
    assert render_structured(data) == json.dumps(data, indent=2)


# ---------------------------------------------------------------------------
# Validation and execute()
# ---------------------------------------------------------------------------

class TestExecute:
    def test_text_is_trimmed(self):
        assert _executor("  insights \n").execute("analysis", "sys", "user") == "insights"

    def test_historian_returns_output(self):
        out = _executor("Summary: A\n\nRationale: B").execute("historian", "sys", "user")
        assert out == HistorianOutput("A", "B")

    def test_json_text_rendered(self):
        payload = json.dumps({"review": "Gaps found", "findings": ["no auth"]})
        assert _executor(payload).execute("review", "sys", "user") == "Gaps found\n\n• no auth"

    def test_dict_payload_accepted(self):
        assert _executor({"tradeoffs": "Speed vs cost"}).execute("tradeoff", "s", "u") == "Speed vs cost"

    @pytest.mark.parametrize("payload", ["", "   \n"])
    def test_empty_payload_rejected(self, payload):
        with pytest.raises(ExternalAgentError) as exc:
            _executor(payload).execute("review", "sys", "user")
        assert exc.value.stage == "review"
        assert "empty" in str(exc.value)

    def test_malformed_payload_rejected(self):
        with pytest.raises(ExternalAgentError, match="Malformed"):
            _executor(42).execute("analysis", "sys", "user")

    def test_response_at_cap_passes(self):
        assert _executor("x" * 10, max_chars=10).execute("analysis", "s", "u") == "x" * 10

    def test_response_over_cap_rejected(self):
        with pytest.raises(ResponseTooLargeError) as exc:
            _executor("x" * 11, max_chars=10).execute("tradeoff", "s", "u")
        assert exc.value.stage == "tradeoff"
        assert isinstance(exc.value, ExternalAgentError)

    def test_prompts_passed_through(self):
        calls = []

        def reasoner(role, system, user):
            calls.append((role, system, user))
            return "ok"

        StageExecutor(reasoner=reasoner).execute("analysis", "system text", "user text")
        assert calls == [("analysis", "system text", "user text")]


# ---------------------------------------------------------------------------
# Retry policy
# ---------------------------------------------------------------------------

def _flaky(failures):
    state = {"calls": 0}

    def reasoner(role, system, user):
        state["calls"] += 1
        if state["calls"] <= failures:
            raise ExternalAgentError(role, "LLM API error: 529 - overloaded")
        return "recovered"

    return reasoner, state


def test_retry_policy_delays():
    policy = RetryPolicy(max_attempts=4, backoff_seconds=0.5, multiplier=2.0)
    assert [policy.delay(n) for n in (1, 2, 3)] == [0.5, 1.0, 2.0]


def test_default_policy_does_not_retry():
    reasoner, state = _flaky(1)
    sleeps = []
    executor = StageExecutor(reasoner=reasoner, sleep=sleeps.append)
    with pytest.raises(ExternalAgentError):
        executor.execute("analysis", "s", "u")
    assert state["calls"] == 1
    assert sleeps == []


def test_retries_then_succeeds():
    reasoner, state = _flaky(2)
    sleeps = []
    policy = RetryPolicy(max_attempts=3, backoff_seconds=1.0, multiplier=2.0)
    executor = StageExecutor(reasoner=reasoner, retry_policy=policy, sleep=sleeps.append)
    assert executor.execute("analysis", "s", "u") == "recovered"
    assert state["calls"] == 3
    assert sleeps == [1.0, 2.0]


def test_retries_exhausted():
    reasoner, state = _flaky(5)
    policy = RetryPolicy(max_attempts=2, backoff_seconds=0.1)
    executor = StageExecutor(reasoner=reasoner, retry_policy=policy, sleep=lambda s: None)
    with pytest.raises(ExternalAgentError, match="529"):
        executor.execute("review", "s", "u")
    assert state["calls"] == 2
