"""Goal and follow-up directive parsing for inbound artifacts."""

import re

from config.goals import GOALS
from core.errors import EmptyArtifactError, InputValidationError
from core.state import Directive

# [GOAL=RISKS] / [FOLLOWUP=MITIGATIONS], plus the newline that ends a marker line
GOAL_MARKER = re.compile(r"\[GOAL=([^\]\n]*)\]\n?")
FOLLOWUP_MARKER = re.compile(r"\[FOLLOWUP=([^\]\n]*)\]\n?")


def validate_artifact(raw):
    """Reject non-string or blank input before any parsing happens."""
    if not isinstance(raw, str):
        raise InputValidationError("artifactContent is required and must be a string")
    if not raw.strip():
        raise InputValidationError("artifactContent cannot be empty")
    return raw


def _strip_markers(text):
    # Loop: removing one marker can splice a new one together from its neighbours
    while True:
        cleaned = GOAL_MARKER.sub("", text)
        cleaned = FOLLOWUP_MARKER.sub("", cleaned)
        if cleaned == text:
            return cleaned
        text = cleaned


def parse_directives(text):
    """Extract the goal and follow-up markers and strip them from the text.

    The first marker of each kind decides its value; every marker is removed
    so the cleaned text can be parsed again without change. An unrecognized
    goal is stripped but yields goal=None.

    Returns a Directive. Raises EmptyArtifactError if nothing but markers
    and whitespace remains.
    """
    goal = None
    followup = None

    goal_match = GOAL_MARKER.search(text)
    if goal_match:
        value = goal_match.group(1).strip().upper()
        goal = value if value in GOALS else None

    followup_match = FOLLOWUP_MARKER.search(text)
    if followup_match:
        followup = followup_match.group(1).strip().upper() or None

    cleaned = _strip_markers(text) if (goal_match or followup_match) else text

    if not cleaned.strip():
        raise EmptyArtifactError("Artifact is empty after removing directive markers")

    return Directive(goal=goal, followup=followup, cleaned_text=cleaned)


def with_directives(text, goal=None, followup=None):
    """Prepend goal/follow-up markers, one per line, the way the UI sends them."""
    header = ""
    if goal:
        header += f"[GOAL={goal}]\n"
    if followup:
        header += f"[FOLLOWUP={followup}]\n"
    return header + text
