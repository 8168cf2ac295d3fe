"""Tests for agents.tool_report."""

from agents.contract_analyzer import ContractAnalyzer
from agents.tool_report import build_tool_report
from config.rules import ENDPOINT_METHODS_RULE


def test_default_report_title_and_footer():
    report = build_tool_report("def handler(event):\n    return event")
    assert report.startswith("Tool Report\n===========\n")
    assert report.endswith("Analysis complete. Lines analyzed: 2")
    assert "Goal:" not in report


def test_default_report_suggests_tests():
    report = build_tool_report("def handler(event): pass")
    assert "Suggestions:\n1. Add unit tests for core functionality" in report


def test_default_report_flags_missing_structure():
    report = build_tool_report("Some prose about an error path.")
    assert "No clear structure - missing function or class definitions" in report
    assert "Error handling could be improved" in report


def test_risks_goal():
    report = build_tool_report("Public API endpoint for payments.", goal="RISKS")
    assert report.startswith("Risk Scan Report")
    assert "API endpoints lack authentication - security risk" in report
    assert "Missing test coverage - unknown failure modes" in report
    assert report.endswith("| Goal: RISKS")


def test_decision_goal_without_options():
    report = build_tool_report("We need a queue.", goal="DECISION")
    assert "No decision alternatives clearly defined" in report


def test_api_contract_without_analysis_uses_keywords():
    report = build_tool_report("A batch job that runs nightly.", goal="API_CONTRACT")
    assert report.startswith("API Contract Analysis")
    assert "No API endpoints identified in design" in report


def test_api_contract_lists_findings():
    analysis = ContractAnalyzer().run("/users")
    report = build_tool_report("/users", goal="API_CONTRACT", analysis=analysis)
    assert "Findings:" in report
    assert f"1. [HIGH] (missing) {ENDPOINT_METHODS_RULE}" in report
    assert "   - Line 1: /users" in report
    assert "Total: 5 | High: 2 | Medium: 2 | Low: 1 | Auto-fixable: 0" in report
    assert report.endswith("Lines analyzed: 1 | Goal: API_CONTRACT")


def test_api_contract_clean_analysis():
    text = "GET /users 200 schema auth rate limit error"
    report = build_tool_report(text, goal="API_CONTRACT", analysis=ContractAnalyzer().run(text))
    assert "No contract issues detected. All contract checks passed." in report
    assert "Findings:" not in report


def test_report_is_deterministic():
    text = "[design]\nclass Ledger:\n    pass\n"
    assert build_tool_report(text, goal="IMPLEMENTABLE") == build_tool_report(text, goal="IMPLEMENTABLE")
