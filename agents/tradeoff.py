"""Tradeoff agent: surfaces engineering tensions."""

from agents.base import StageAgent


class TradeoffAgent(StageAgent):
    """Third stage: weighs the analysis against the review."""

    name = "tradeoff"
    description = "Surfaces engineering tensions between competing options"

    def user_message(self, context):
        return (
            "Evaluate trade-offs based on the following:\n\n"
            f"Analysis:\n{context.analysis_output}\n\n"
            f"Review:\n{context.review_output}"
        )
