"""Review agent: challenges the analysis."""

from agents.base import StageAgent


class ReviewAgent(StageAgent):
    """Second stage: critiques the analysis output."""

    name = "review"
    description = "Challenges assumptions and finds gaps in the analysis"

    def user_message(self, context):
        return f"Review the following analysis output:\n\n{context.analysis_output}"
