"""Main pipeline orchestrator: four reasoning stages in strict order."""

import logging
from datetime import datetime, timezone

from agents.analysis import AnalysisAgent
from agents.contract_analyzer import ContractAnalyzer
from agents.historian import HistorianAgent
from agents.review import ReviewAgent
from agents.tool_report import build_tool_report
from agents.tradeoff import TradeoffAgent
from config.defaults import DEFAULTS
from core.errors import EmbeddingError, SimilaritySearchError
from core.executor import StageExecutor
from core.memory import DecisionMemory
from core.state import (
    STAGE_ORDER,
    AgentMessage,
    Decision,
    PipelineContext,
    PipelineResult,
    RunOutcome,
)
from manager.directives import parse_directives, validate_artifact
from utils.embeddings import embed_text, embedding_input

logger = logging.getLogger(__name__)


def _utcnow():
    return datetime.now(timezone.utc)


def stage_message(role, output):
    """Display text for one stage's output."""
    if role == "historian":
        return f"{output.decision_summary}\n\n{output.decision_rationale}"
    return output


class Orchestrator:
    """Runs the full flow: directives → contract check → tool report → embed →
    recall → analysis → review → tradeoff → historian → persist.

    All-or-nothing: any stage failure aborts the remaining stages and nothing
    from the run is persisted. Similarity search is the one collaborator
    whose failure degrades instead of aborting.

    Args:
        reasoner: reasoning call, see StageExecutor. Defaults to the Claude client.
        embedder: callable(text) -> list[float]. Defaults to the Voyage AI client.
        memory: DecisionMemory (or anything with its interface).
        retry_policy: optional RetryPolicy for reasoning calls.
        similar_limit: how many past decisions to recall.
    """

    def __init__(self, reasoner=None, embedder=None, memory=None, retry_policy=None,
                 similar_limit=None, clock=None):
        self.similar_limit = similar_limit or DEFAULTS["similar_decisions_limit"]
        self.executor = StageExecutor(reasoner=reasoner, retry_policy=retry_policy)
        self.embedder = embedder or embed_text
        self.memory = memory if memory is not None else DecisionMemory()
        self.analyzer = ContractAnalyzer()
        self.clock = clock or _utcnow
        self.stages = [
            AnalysisAgent(),
            ReviewAgent(),
            TradeoffAgent(),
            HistorianAgent(similar_limit=self.similar_limit),
        ]

    def create_context(self, directive, tool_report, similar_decisions):
        """A fresh context for one run. Never shared between runs."""
        return PipelineContext(
            artifact_text=directive.cleaned_text,
            raw_report_text=tool_report,
            similar_decisions=list(similar_decisions),
            goal=directive.goal,
            followup=directive.followup,
        )

    def run_stages(self, context: PipelineContext) -> PipelineResult:
        """Execute analysis → review → tradeoff → historian. No branching, no skipping."""
        completed_at = {}
        for stage in self.stages:
            logger.info("Stage %s started", stage.name)
            stage.run(context, self.executor)
            completed_at[stage.name] = self.clock()
            output = context.output_for(stage.name)
            logger.info("Stage %s finished (%d chars)", stage.name, len(stage_message(stage.name, output)))

        return PipelineResult(
            analysis=context.analysis_output,
            review=context.review_output,
            tradeoff=context.tradeoff_output,
            historian=context.historian_output,
            completed_at=completed_at,
        )

    def embed(self, text):
        embedding = self.embedder(text)
        if not embedding:
            raise EmbeddingError("Failed to generate embedding for decision storage")
        return list(embedding)

    def recall(self, embedding):
        """Similar past decisions, or an empty list if the search fails."""
        try:
            return self.memory.find_similar(embedding, self.similar_limit)
        except SimilaritySearchError as e:
            logger.warning("Similarity search failed, continuing without past decisions: %s", e)
            return []

    def run_full(self, raw_text) -> RunOutcome:
        """Run one artifact through the whole pipeline.

        Raises a PipelineError subclass on failure; in that case nothing
        from this run has been persisted.
        """
        validate_artifact(raw_text)
        directive = parse_directives(raw_text)
        content = directive.cleaned_text

        contract_analysis = None
        if directive.goal == "API_CONTRACT":
            contract_analysis = self.analyzer.run(content)

        tool_report = build_tool_report(content, directive.goal, contract_analysis)

        # Same vector for the search and for the stored decision
        embedding = self.embed(embedding_input(content, tool_report))
        similar = self.recall(embedding)

        context = self.create_context(directive, tool_report, similar)
        result = self.run_stages(context)

        messages = [
            AgentMessage(
                agent_role=role,
                message=stage_message(role, getattr(result, role)),
                created_at=result.completed_at[role],
            )
            for role in STAGE_ORDER
        ]
        decision = self._persist(content, tool_report, messages, result, embedding)

        return RunOutcome(
            directive=directive,
            tool_report=tool_report,
            result=result,
            agent_messages=messages,
            decision=decision,
            contract_analysis=contract_analysis,
        )

    def _persist(self, content, tool_report, messages, result, embedding):
        """Write the run to memory in one step. Only called once every stage has succeeded."""
        now = self.clock()
        decision = Decision(
            summary=result.historian.decision_summary,
            rationale=result.historian.decision_rationale,
            embedding=embedding,
            agent_roles_involved=list(STAGE_ORDER),
            created_at=now,
        )
        self.memory.save_run(content, tool_report, messages, decision, now)
        return decision
