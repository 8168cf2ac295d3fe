"""Pipeline state models shared across all stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

STAGE_ORDER = ("analysis", "review", "tradeoff", "historian")

SEVERITIES = ("high", "medium", "low")
CATEGORIES = ("missing", "ambiguous", "risk")


@dataclass(frozen=True)
class Directive:
    goal: str | None            # one of config.goals.GOALS
    followup: str | None        # follow-up code, e.g. "MITIGATIONS"
    cleaned_text: str


@dataclass(frozen=True)
class Finding:
    id: str                     # "contract-1", unique per analysis run
    category: str               # "missing", "ambiguous", "risk"
    rule: str
    evidence: tuple[str, ...]
    severity: str               # "low", "medium", "high"
    auto_fixable: bool = False

    def to_dict(self):
        return {
            "id": self.id,
            "category": self.category,
            "rule": self.rule,
            "evidence": list(self.evidence),
            "severity": self.severity,
            "autoFixable": self.auto_fixable,
        }


@dataclass(frozen=True)
class AnalysisStatistics:
    total: int
    by_severity: dict
    by_category: dict
    auto_fixable: int

    @classmethod
    def from_findings(cls, findings):
        """Straight aggregation over the finding list."""
        return cls(
            total=len(findings),
            by_severity={s: sum(1 for f in findings if f.severity == s) for s in SEVERITIES},
            by_category={c: sum(1 for f in findings if f.category == c) for c in CATEGORIES},
            auto_fixable=sum(1 for f in findings if f.auto_fixable),
        )

    def to_dict(self):
        return {
            "total": self.total,
            "bySeverity": dict(self.by_severity),
            "byCategory": dict(self.by_category),
            "autoFixable": self.auto_fixable,
        }


@dataclass
class Section:
    title: str
    content: str
    line_start: int             # 0-based line of the header


@dataclass
class ContractAnalysis:
    findings: list[Finding]
    lines_analyzed: int
    statistics: AnalysisStatistics
    sections: list[Section] = field(default_factory=list)

    def to_dict(self):
        return {
            "findings": [f.to_dict() for f in self.findings],
            "metadata": {
                "linesAnalyzed": self.lines_analyzed,
                "analysisGoal": "API_CONTRACT",
                "statistics": self.statistics.to_dict(),
            },
        }


@dataclass
class SimilarDecision:
    summary: str
    rationale: str
    score: float = 0.0
    created_at: datetime | None = None


@dataclass(frozen=True)
class HistorianOutput:
    decision_summary: str
    decision_rationale: str


@dataclass
class PipelineContext:
    """Accumulates stage outputs for one run. Owned by a single orchestrator call."""

    artifact_text: str
    raw_report_text: str
    similar_decisions: list[SimilarDecision] = field(default_factory=list)
    goal: str | None = None
    followup: str | None = None
    analysis_output: str | None = None
    review_output: str | None = None
    tradeoff_output: str | None = None
    historian_output: HistorianOutput | None = None

    def record(self, role, output):
        """Store a stage's normalized output. Each stage writes exactly once."""
        attr = f"{role}_output"
        if role not in STAGE_ORDER:
            raise ValueError(f"Unknown stage: {role}")
        if getattr(self, attr) is not None:
            raise ValueError(f"Stage '{role}' output already recorded")
        setattr(self, attr, output)

    def output_for(self, role):
        return getattr(self, f"{role}_output")


@dataclass
class PipelineResult:
    analysis: str
    review: str
    tradeoff: str
    historian: HistorianOutput
    completed_at: dict = field(default_factory=dict)   # role -> datetime


@dataclass
class AgentMessage:
    agent_role: str
    message: str
    created_at: datetime


@dataclass
class Decision:
    summary: str
    rationale: str
    embedding: list[float]
    agent_roles_involved: list[str]
    created_at: datetime
    artifact_id: str = ""
    id: str = ""


@dataclass
class RunOutcome:
    """Everything one successful run produced, threaded to the response assembler."""

    directive: Directive
    tool_report: str
    result: PipelineResult
    agent_messages: list[AgentMessage]
    decision: Decision
    contract_analysis: ContractAnalysis | None = None
