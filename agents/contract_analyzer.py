"""Contract analyzer: deterministic API contract checks. Zero LLM calls."""

import logging

from config.rules import (
    AMBIGUOUS_ENDPOINT,
    AMBIGUOUS_ENDPOINTS_RULE,
    AMBIGUOUS_EXCERPT_CHARS,
    CONTRACT_RULE_ORDER,
    ENDPOINT_METHODS_RULE,
    ENDPOINT_TOKEN,
    HTTP_METHOD,
    MARKDOWN_HEADER,
    MAX_AMBIGUOUS_EVIDENCE,
    MAX_ENDPOINT_EVIDENCE,
    METHOD_WITH_PATH,
    VOCABULARY_RULES,
)
from core.state import AnalysisStatistics, ContractAnalysis, Finding, Section

logger = logging.getLogger(__name__)


def split_sections(lines):
    """Group lines into markdown sections, one per header. Text before the first header is dropped."""
    sections = []
    current = None
    for line_num, line in enumerate(lines):
        header = MARKDOWN_HEADER.match(line)
        if header:
            if current:
                sections.append(current)
            current = Section(title=header.group(2).strip(), content=line + "\n", line_start=line_num)
        elif current:
            current.content += line + "\n"
    if current:
        sections.append(current)
    return sections


class ContractAnalyzer:
    """Checks a design artifact for API contract gaps.

    Stateless: every run builds its own finding list, so one instance can be
    shared across concurrent requests. Rules run in CONTRACT_RULE_ORDER and
    findings keep that order, not severity order.
    """

    name = "contract_analyzer"

    def run(self, text) -> ContractAnalysis:
        if not text or not isinstance(text, str):
            return ContractAnalysis(
                findings=[],
                lines_analyzed=0,
                statistics=AnalysisStatistics.from_findings([]),
            )

        lines = text.split("\n")
        findings = []

        for rule_id in CONTRACT_RULE_ORDER:
            check = getattr(self, f"_check_{rule_id}", None)
            if check:
                result = check(text, lines)
            else:
                result = self._check_vocabulary(rule_id, text)
            if result:
                category, rule, evidence, severity = result
                findings.append(Finding(
                    id=f"contract-{len(findings) + 1}",
                    category=category,
                    rule=rule,
                    evidence=tuple(evidence),
                    severity=severity,
                    auto_fixable=False,
                ))

        logger.debug("Contract analysis: %d finding(s) over %d line(s)", len(findings), len(lines))

        return ContractAnalysis(
            findings=findings,
            lines_analyzed=len(lines),
            statistics=AnalysisStatistics.from_findings(findings),
            sections=split_sections(lines),
        )

    # ------------------------------------------------------------------
    # Rule 1: path-like tokens on lines with no HTTP verb
    # ------------------------------------------------------------------

    def _check_endpoint_methods(self, text, lines):
        offending = []
        for line_num, line in enumerate(lines, 1):
            if HTTP_METHOD.search(line):
                continue
            tokens = [t for t in ENDPOINT_TOKEN.findall(line) if len(t) > 1]
            if tokens:
                offending.append(f"Line {line_num}: {line.strip()}")

        # Any "VERB /path" pair in the document suppresses the rule
        if not offending or METHOD_WITH_PATH.search(text):
            return None
        return "missing", ENDPOINT_METHODS_RULE, offending[:MAX_ENDPOINT_EVIDENCE], "high"

    # ------------------------------------------------------------------
    # Rule 6: "Endpoint: /path" blocks that stop after one segment
    # ------------------------------------------------------------------

    def _check_ambiguous_endpoints(self, text, lines):
        evidence = []
        for match in AMBIGUOUS_ENDPOINT.finditer(text):
            if len(evidence) >= MAX_AMBIGUOUS_EVIDENCE:
                break
            line_num = text.count("\n", 0, match.start()) + 1
            excerpt = match.group(0).strip()[:AMBIGUOUS_EXCERPT_CHARS]
            evidence.append(f"Line {line_num}: {excerpt}")
        if not evidence:
            return None
        return "ambiguous", AMBIGUOUS_ENDPOINTS_RULE, evidence, "low"

    # ------------------------------------------------------------------
    # Rules 2-5, 7, 8: trigger vocabulary present, required vocabulary absent
    # ------------------------------------------------------------------

    def _check_vocabulary(self, rule_id, text):
        trigger, required, category, severity, rule, evidence = VOCABULARY_RULES[rule_id]
        if trigger.search(text) and not required.search(text):
            return category, rule, [evidence], severity
        return None


def run_contract_analyzer(text) -> ContractAnalysis:
    """Convenience wrapper for a one-off analysis."""
    return ContractAnalyzer().run(text)
