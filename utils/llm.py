"""Claude API client for stage reasoning calls."""

import json
import os
import re
from dataclasses import dataclass

import anthropic

from config.defaults import DEFAULTS
from core.errors import ExternalAgentError

MAX_TOKENS = DEFAULTS["max_tokens"]


@dataclass
class AgentReply:
    """Raw reasoning payload: plain text, or a JSON object when the model returned one."""

    text: str
    data: dict | None = None

    @property
    def kind(self):
        return "json" if self.data is not None else "text"


def get_model():
    return os.environ.get("DESIGN_COUNCIL_MODEL") or DEFAULTS["model"]


def get_client():
    """Return an Anthropic client. Raises if no API key is set."""
    api_key = os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        raise RuntimeError(
            "ANTHROPIC_API_KEY environment variable is not set. "
            "Get a key at https://console.anthropic.com/ and run:\n"
            "  export ANTHROPIC_API_KEY='your-key-here'"
        )
    return anthropic.Anthropic(api_key=api_key)


def parse_reply(text):
    """Wrap a raw payload, recognising a JSON object (legacy providers) when present."""
    cleaned = text.strip()
    # Strip markdown fences if the model included them
    if cleaned.startswith("```"):
        cleaned = re.sub(r"^```\w*\n?", "", cleaned)
        cleaned = re.sub(r"\n?```$", "", cleaned)
        cleaned = cleaned.strip()
    if cleaned.startswith("{"):
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError:
            return AgentReply(text=text)
        if isinstance(data, dict):
            return AgentReply(text=text, data=data)
    return AgentReply(text=text)


def call_llm(role, system_prompt, user_prompt):
    """Issue one reasoning call for a stage.

    Args:
        role: Stage name, attached to any error raised.
        system_prompt: Role instructions plus goal/follow-up context.
        user_prompt: Serialized pipeline context for the stage.

    Returns:
        AgentReply with the raw text and, if the text is a JSON object, its parsed form.

    Raises:
        ExternalAgentError: missing credentials or a failed API call.
    """
    try:
        client = get_client()
    except RuntimeError as e:
        raise ExternalAgentError(role, str(e)) from e

    try:
        # Streaming avoids SDK timeouts on long generations
        text = ""
        with client.messages.stream(
            model=get_model(),
            max_tokens=MAX_TOKENS,
            temperature=DEFAULTS["temperature"],
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        ) as stream:
            for chunk in stream.text_stream:
                text += chunk
    except anthropic.APIStatusError as e:
        raise ExternalAgentError(role, f"LLM API error: {e.status_code} - {e.message}") from e
    except anthropic.APIError as e:
        raise ExternalAgentError(role, f"LLM API error: {e}") from e

    return parse_reply(text)
