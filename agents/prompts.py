"""System prompt composition: role text plus goal and follow-up context."""

import os

from config.goals import FOLLOWUP_CONTEXT, FOLLOWUP_LABELS, GOAL_CONTEXT

_PROMPT_DIR = os.path.join(os.path.dirname(__file__), "prompts")

NO_SIMILAR_DECISIONS = (
    "No similar past decisions were found. This is a new decision context: "
    "state this explicitly in your rationale and explain what makes it novel. "
    "Do not reference or invent past decisions."
)


def load_prompt(role):
    with open(os.path.join(_PROMPT_DIR, f"{role}.txt")) as f:
        return f.read().strip()


def goal_block(goal):
    if goal not in GOAL_CONTEXT:
        return ""
    return f"ANALYSIS GOAL: {goal}\n{GOAL_CONTEXT[goal]}"


def followup_block(followup):
    if followup not in FOLLOWUP_CONTEXT:
        return ""
    return (
        f"FOLLOW-UP FOCUS: {FOLLOWUP_LABELS[followup]} ({followup})\n"
        f"{FOLLOWUP_CONTEXT[followup]}\n"
        "This is a repeat run: keep the analysis goal and narrow your answer to this focus."
    )


def compose_system_prompt(role, goal=None, followup=None):
    """Base role description, then the goal block, then the follow-up block beneath it."""
    parts = [load_prompt(role)]
    for block in (goal_block(goal), followup_block(followup)):
        if block:
            parts.append(block)
    return "\n\n".join(parts)


def render_similar_decisions(similar_decisions, limit):
    """Numbered list of past decisions, or the explicit no-history instruction."""
    decisions = list(similar_decisions)[:limit]
    if not decisions:
        return NO_SIMILAR_DECISIONS

    lines = ["Similar past decisions to consider (most similar first):"]
    for idx, d in enumerate(decisions, 1):
        lines.append(f"{idx}. Summary: {d.summary}\n   Rationale: {d.rationale}")
    return "\n".join(lines)
