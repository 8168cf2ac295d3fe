"""Stage executor: one reasoning call per stage, normalized output."""

import json
import logging
import re
import time
from dataclasses import dataclass

from config.defaults import DEFAULTS
from core.errors import (
    ExternalAgentError,
    HistorianOutputInvalidError,
    ResponseTooLargeError,
)
from core.state import HistorianOutput
from utils.llm import AgentReply, call_llm, parse_reply

logger = logging.getLogger(__name__)

# "Summary: ...\n\nRationale: ..." with each label at the start of a line
LABELED_DECISION = re.compile(
    r"(?:^|\n)[ \t]*Summary[ \t]*:[ \t]*(?P<summary>.*?)\s*\n[ \t]*Rationale[ \t]*:[ \t]*(?P<rationale>.*)",
    re.IGNORECASE | re.DOTALL,
)

# Structured-output field names, checked in order
_SUMMARY_KEYS = ("decisionSummary", "summary")
_RATIONALE_KEYS = ("decisionRationale", "rationale")

# Fields rendered first when a stage returns a JSON object
_TEXT_FIELDS = (
    "insights", "analysis", "summary", "review", "challenges", "tradeoffs",
    "tradeOffs", "tensions", "recommendations", "conclusion",
)
_LIST_FIELDS = ("keyPoints", "findings")


@dataclass
class RetryPolicy:
    """Bounded per-stage retry with exponential backoff. The default is a single attempt."""

    max_attempts: int = DEFAULTS["retry_max_attempts"]
    backoff_seconds: float = DEFAULTS["retry_backoff_seconds"]
    multiplier: float = DEFAULTS["retry_backoff_multiplier"]

    def delay(self, attempt):
        """Seconds to wait after the given failed attempt (1-based)."""
        return self.backoff_seconds * (self.multiplier ** (attempt - 1))


def _render_value(value):
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        items = [
            v.strip() if isinstance(v, str) else json.dumps(v, ensure_ascii=False)
            for v in value
        ]
        return "\n".join(f"• {item}" for item in items if item)
    return json.dumps(value, indent=2, ensure_ascii=False)


def render_structured(data):
    """Readable text for a stage's JSON object output.

    Known fields come first, unlabeled. Every other key follows as a
    "key:" block so no part of the object is dropped.
    """
    known = _TEXT_FIELDS + _LIST_FIELDS
    parts = []
    for key in known:
        if key in data and data[key]:
            rendered = _render_value(data[key])
            if rendered:
                parts.append(rendered)
    if not parts:
        return json.dumps(data, indent=2, ensure_ascii=False)

    for key, value in data.items():
        if key in known or value in (None, "", [], {}):
            continue
        parts.append(f"{key}:\n{_render_value(value)}")
    return "\n\n".join(parts)


def _first_field(data, keys):
    for key in keys:
        if key in data:
            return data[key]
    return None


def normalize_historian(reply: AgentReply, fallback_chars=None) -> HistorianOutput:
    """Reduce the terminal stage's payload to a summary/rationale pair.

    A JSON object uses its summary/rationale fields. Text uses the labeled
    sections when present; otherwise the first fallback_chars characters
    become the summary and the whole trimmed text the rationale.
    """
    if fallback_chars is None:
        fallback_chars = DEFAULTS["summary_fallback_chars"]

    summary = rationale = None

    if reply.data is not None:
        raw_summary = _first_field(reply.data, _SUMMARY_KEYS)
        raw_rationale = _first_field(reply.data, _RATIONALE_KEYS)
        if raw_summary is not None or raw_rationale is not None:
            summary = raw_summary.strip() if isinstance(raw_summary, str) else ""
            rationale = raw_rationale.strip() if isinstance(raw_rationale, str) else ""
    else:
        match = LABELED_DECISION.search(reply.text)
        if match and match.group("summary").strip() and match.group("rationale").strip():
            summary = match.group("summary").strip()
            rationale = match.group("rationale").strip()

    if summary is None:
        text = reply.text.strip()
        summary = text[:fallback_chars]
        rationale = text

    if not summary:
        raise HistorianOutputInvalidError("Historian output must contain a non-empty decision summary")
    if not rationale:
        raise HistorianOutputInvalidError("Historian output must contain a non-empty decision rationale")
    return HistorianOutput(decision_summary=summary, decision_rationale=rationale)


def _as_reply(role, raw):
    """Accept AgentReply, plain text or a dict from a reasoner."""
    if isinstance(raw, AgentReply):
        return raw
    if isinstance(raw, str):
        return parse_reply(raw)
    if isinstance(raw, dict):
        return AgentReply(text=json.dumps(raw, ensure_ascii=False), data=raw)
    raise ExternalAgentError(role, f"Malformed reasoning payload of type {type(raw).__name__}")


class StageExecutor:
    """Runs one stage's reasoning call and validates what comes back.

    Args:
        reasoner: callable(role, system_prompt, user_prompt) returning an
                  AgentReply, a string or a dict. Defaults to utils.llm.call_llm.
        retry_policy: RetryPolicy; defaults to a single attempt.
        max_chars: response size cap.
        sleep: injectable for tests.
    """

    def __init__(self, reasoner=None, retry_policy=None, max_chars=None, sleep=time.sleep):
        self.reasoner = reasoner or call_llm
        self.retry_policy = retry_policy or RetryPolicy()
        self.max_chars = max_chars or DEFAULTS["max_response_chars"]
        self.sleep = sleep

    def call(self, role, system_prompt, user_prompt) -> AgentReply:
        attempts = max(1, self.retry_policy.max_attempts)
        for attempt in range(1, attempts + 1):
            try:
                return _as_reply(role, self.reasoner(role, system_prompt, user_prompt))
            except ExternalAgentError as e:
                if attempt >= attempts:
                    raise
                delay = self.retry_policy.delay(attempt)
                logger.warning("Stage %s attempt %d/%d failed (%s); retrying in %.1fs",
                               role, attempt, attempts, e, delay)
                self.sleep(delay)

    def validate(self, role, reply: AgentReply):
        if not reply.text or not reply.text.strip():
            raise ExternalAgentError(role, "No content in LLM API response or content is empty")
        if len(reply.text) > self.max_chars:
            raise ResponseTooLargeError(
                role,
                f"LLM response too long ({len(reply.text)} chars). Maximum allowed: {self.max_chars}",
            )

    def execute(self, role, system_prompt, user_prompt):
        """Return trimmed text for stages 1-3, a HistorianOutput for the historian."""
        reply = self.call(role, system_prompt, user_prompt)
        self.validate(role, reply)
        logger.debug("Stage %s returned a %s payload (%d chars)", role, reply.kind, len(reply.text))

        if role == "historian":
            return normalize_historian(reply)
        if reply.data is not None:
            return render_structured(reply.data)
        return reply.text.strip()
