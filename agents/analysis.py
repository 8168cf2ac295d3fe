"""Analysis agent: extracts insights and decision points from the artifact."""

from agents.base import StageAgent


class AnalysisAgent(StageAgent):
    """First stage: reads the artifact and the tool report."""

    name = "analysis"
    description = "Extracts key insights, constraints and decision points"

    def user_message(self, context):
        return (
            "Analyze the following artifact and report:\n\n"
            f"Artifact:\n{context.artifact_text}\n\n"
            f"Report:\n{context.raw_report_text}"
        )
