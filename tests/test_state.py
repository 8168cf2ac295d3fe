"""Tests for core.state models."""

import pytest

from core.state import (
    AnalysisStatistics,
    ContractAnalysis,
    Finding,
    HistorianOutput,
    PipelineContext,
    STAGE_ORDER,
)


def _finding(n, severity="high", category="missing", auto_fixable=False):
    return Finding(id=f"contract-{n}", category=category, rule=f"Rule {n}",
                   evidence=("Line 1: /users",), severity=severity, auto_fixable=auto_fixable)


def test_stage_order():
    assert STAGE_ORDER == ("analysis", "review", "tradeoff", "historian")


def test_finding_to_dict():
    f = _finding(1)
    assert f.to_dict() == {
        "id": "contract-1",
        "category": "missing",
        "rule": "Rule 1",
        "evidence": ["Line 1: /users"],
        "severity": "high",
        "autoFixable": False,
    }


def test_finding_is_frozen():
    f = _finding(1)
    with pytest.raises(AttributeError):
        f.severity = "low"


def test_statistics_from_findings():
    findings = [
        _finding(1, "high", "missing"),
        _finding(2, "medium", "risk", auto_fixable=True),
        _finding(3, "low", "ambiguous"),
        _finding(4, "high", "missing"),
    ]
    stats = AnalysisStatistics.from_findings(findings)
    assert stats.total == 4
    assert stats.by_severity == {"high": 2, "medium": 1, "low": 1}
    assert stats.by_category == {"missing": 2, "ambiguous": 1, "risk": 1}
    assert stats.auto_fixable == 1


def test_statistics_empty():
    stats = AnalysisStatistics.from_findings([])
    assert stats.to_dict() == {
        "total": 0,
        "bySeverity": {"high": 0, "medium": 0, "low": 0},
        "byCategory": {"missing": 0, "ambiguous": 0, "risk": 0},
        "autoFixable": 0,
    }


def test_contract_analysis_to_dict():
    findings = [_finding(1)]
    analysis = ContractAnalysis(findings=findings, lines_analyzed=3,
                                statistics=AnalysisStatistics.from_findings(findings))
    data = analysis.to_dict()
    assert data["findings"][0]["id"] == "contract-1"
    assert data["metadata"]["linesAnalyzed"] == 3
    assert data["metadata"]["analysisGoal"] == "API_CONTRACT"
    assert data["metadata"]["statistics"]["total"] == 1


def test_context_defaults():
    ctx = PipelineContext(artifact_text="design", raw_report_text="report")
    assert ctx.similar_decisions == []
    assert ctx.goal is None
    assert all(ctx.output_for(role) is None for role in STAGE_ORDER)


def test_context_record_and_read_back():
    ctx = PipelineContext(artifact_text="design", raw_report_text="report")
    ctx.record("analysis", "insights")
    ctx.record("historian", HistorianOutput("s", "r"))
    assert ctx.analysis_output == "insights"
    assert ctx.output_for("historian").decision_summary == "s"


def test_context_record_is_write_once():
    ctx = PipelineContext(artifact_text="design", raw_report_text="report")
    ctx.record("review", "critique")
    with pytest.raises(ValueError):
        ctx.record("review", "another critique")
    assert ctx.review_output == "critique"


def test_context_rejects_unknown_stage():
    ctx = PipelineContext(artifact_text="design", raw_report_text="report")
    with pytest.raises(ValueError):
        ctx.record("planner", "plan")


def test_contexts_do_not_share_similar_decisions():
    a = PipelineContext(artifact_text="a", raw_report_text="r")
    b = PipelineContext(artifact_text="b", raw_report_text="r")
    a.similar_decisions.append("x")
    assert b.similar_decisions == []


def test_historian_output_fields():
    out = HistorianOutput(decision_summary="Use Postgres", decision_rationale="Relational data")
    assert out.decision_summary == "Use Postgres"
    assert out.decision_rationale == "Relational data"
