"""Historian agent: synthesizes the chain into a decision."""

from agents.base import StageAgent
from agents.prompts import render_similar_decisions
from config.defaults import DEFAULTS


class HistorianAgent(StageAgent):
    """Terminal stage: all prior outputs plus similar past decisions.

    The memory section only ever renders the decisions in the context. With
    none, it tells the model so explicitly instead of leaving a gap.
    """

    name = "historian"
    description = "Synthesizes all outputs and past decisions into a final decision"

    def __init__(self, similar_limit=None):
        self.similar_limit = similar_limit or DEFAULTS["similar_decisions_limit"]

    def user_message(self, context):
        return (
            "Synthesize the following outputs into a final decision:\n\n"
            f"Analysis:\n{context.analysis_output}\n\n"
            f"Review:\n{context.review_output}\n\n"
            f"Tradeoff:\n{context.tradeoff_output}\n\n"
            f"{render_similar_decisions(context.similar_decisions, self.similar_limit)}"
        )
