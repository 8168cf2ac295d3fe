"""Tool report: deterministic engineering feedback on an artifact. Zero LLM calls."""

from config.goals import REPORT_TITLES


def _keyword_checks(content, goal):
    """Goal-specific issues and suggestions from simple keyword presence."""
    lower = content.lower()
    line_count = len(content.split("\n"))
    has_functions = "function" in content or "=>" in content or "def " in content
    has_classes = "class " in content
    has_tests = "test" in lower
    has_errors = "error" in lower
    has_api = "api" in lower or "endpoint" in lower
    has_auth = "auth" in lower

    issues = []
    suggestions = []

    if goal == "RISKS":
        if has_errors:
            issues.append("Error handling gaps detected - potential runtime failures")
        if not has_tests:
            issues.append("Missing test coverage - unknown failure modes")
        if has_api and not has_auth:
            issues.append("API endpoints lack authentication - security risk")
        if line_count > 500:
            issues.append("High complexity increases maintenance risk")
        suggestions.append("Perform security audit on external interfaces")
        suggestions.append("Add monitoring and alerting for critical paths")

    elif goal == "IMPLEMENTABLE":
        if not has_functions and not has_classes:
            issues.append("Design lacks implementation details - no clear structure")
        if "interface" not in lower and "type" not in lower:
            issues.append("Missing type definitions - implementation unclear")
        suggestions.append("Break down into smaller, testable modules")
        suggestions.append("Define clear input/output contracts")
        if has_classes and "constructor" not in lower and "__init__" not in content:
            suggestions.append("Specify initialization requirements")

    elif goal == "API_CONTRACT":
        if has_api:
            if "method" not in lower and "GET" not in content and "POST" not in content:
                issues.append("HTTP methods not specified for endpoints")
            if "status" not in lower and "code" not in lower:
                issues.append("Response status codes not defined")
            suggestions.append("Define request/response schemas")
            suggestions.append("Specify authentication requirements per endpoint")
            suggestions.append("Document error response formats")
        else:
            issues.append("No API endpoints identified in design")

    elif goal == "TEST_PLAN":
        if not has_tests:
            issues.append("No existing test structure found")
        suggestions.append("Define unit test coverage targets")
        suggestions.append("Plan integration test scenarios")
        suggestions.append("Design load/performance test cases")
        if has_api:
            suggestions.append("Include API contract testing")

    elif goal == "DECISION":
        if "option" not in lower and "approach" not in lower:
            issues.append("No decision alternatives clearly defined")
        suggestions.append("Identify all viable options")
        suggestions.append("Document trade-offs for each option")
        suggestions.append("Establish decision criteria")

    else:
        if line_count > 500:
            issues.append("Large file detected - consider splitting into smaller modules")
        if not has_functions and not has_classes:
            issues.append("No clear structure - missing function or class definitions")
        if has_errors:
            issues.append("Error handling could be improved")
        if not has_tests:
            suggestions.append("Add unit tests for core functionality")

    return issues, suggestions


def _numbered(heading, items):
    lines = [heading]
    for idx, item in enumerate(items, 1):
        lines.append(f"{idx}. {item}")
    return "\n".join(lines) + "\n"


def _findings_section(analysis):
    """Render contract findings in rule order, with their evidence."""
    if not analysis.findings:
        return "No contract issues detected. All contract checks passed.\n"

    lines = ["Findings:"]
    for idx, finding in enumerate(analysis.findings, 1):
        lines.append(f"{idx}. [{finding.severity.upper()}] ({finding.category}) {finding.rule}")
        for excerpt in finding.evidence:
            lines.append(f"   - {excerpt}")

    stats = analysis.statistics
    lines.append("")
    lines.append(
        f"Total: {stats.total} | "
        f"High: {stats.by_severity['high']} | "
        f"Medium: {stats.by_severity['medium']} | "
        f"Low: {stats.by_severity['low']} | "
        f"Auto-fixable: {stats.auto_fixable}"
    )
    return "\n".join(lines) + "\n"


def build_tool_report(content, goal=None, analysis=None):
    """Build the tool report for an artifact.

    With the API_CONTRACT goal and a contract analysis, the report lists the
    analyzer's findings; otherwise it is the keyword heuristic report.
    """
    title = REPORT_TITLES.get(goal, "Tool Report")
    report = f"{title}\n{'=' * len(title)}\n\n"

    if goal == "API_CONTRACT" and analysis is not None:
        report += _findings_section(analysis) + "\n"
        lines_analyzed = analysis.lines_analyzed
    else:
        issues, suggestions = _keyword_checks(content, goal)
        if issues:
            report += _numbered("Issues Found:", issues) + "\n"
        if suggestions:
            report += _numbered("Suggestions:", suggestions) + "\n"
        if not issues and not suggestions:
            report += "No issues detected. Structure looks good.\n"
        lines_analyzed = len(content.split("\n"))

    report += f"\nAnalysis complete. Lines analyzed: {lines_analyzed}"
    if goal:
        report += f" | Goal: {goal}"
    return report
