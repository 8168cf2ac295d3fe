#!/usr/bin/env python3
"""Design Council - multi-agent design review with decision memory.

Usage:
    python main.py analyze --file design.md                          # full pipeline
    python main.py analyze --file design.md --goal RISKS             # with an analysis goal
    python main.py analyze --file api.md --goal API_CONTRACT --followup ERROR_CODES
    python main.py analyze --file design.md --json                   # raw response JSON
    python main.py contract-check --file api.md                      # deterministic checks only
    python main.py list-goals
"""

import argparse
import json
import logging
import sys

from agents.contract_analyzer import ContractAnalyzer
from config.goals import FOLLOWUP_LABELS, FOLLOWUPS_BY_GOAL, GOAL_HELP, GOALS
from core.errors import InputValidationError, PipelineError
from core.orchestrator import Orchestrator
from core.response import assemble_response
from manager.directives import parse_directives, validate_artifact, with_directives
from utils.log import configure_logging

logger = logging.getLogger(__name__)


def _read_artifact(path):
    if path == "-":
        return sys.stdin.read()
    with open(path) as f:
        return f.read()


def _format_findings(analysis):
    """Format contract findings for CLI display."""
    if not analysis.findings:
        return "  No contract issues found."
    lines = []
    for finding in analysis.findings:
        lines.append(f"  [{finding.severity.upper()}] ({finding.category}) {finding.rule}")
        for excerpt in finding.evidence:
            lines.append(f"           {excerpt}")
    return "\n".join(lines)


def cmd_analyze(args):
    """Run the full pipeline on an artifact file."""
    raw = with_directives(_read_artifact(args.file), args.goal, args.followup)
    outcome = Orchestrator().run_full(raw)
    response = assemble_response(outcome)

    if args.json:
        print(json.dumps(response, indent=2))
        return

    print(outcome.tool_report)
    for msg in response["agentMessages"]:
        print(f"\n--- {msg['agentRole'].capitalize()} ---")
        print(msg["message"])

    decision = response["decisions"][0]
    print("\n=== Decision ===")
    print(f"Summary:   {decision['summary']}")
    print(f"\nRationale: {decision['rationale']}")


def cmd_contract_check(args):
    """Run only the deterministic contract analyzer."""
    directive = parse_directives(validate_artifact(_read_artifact(args.file)))
    analysis = ContractAnalyzer().run(directive.cleaned_text)

    if args.json:
        print(json.dumps(analysis.to_dict(), indent=2))
        return

    stats = analysis.statistics
    print(f"Lines analyzed: {analysis.lines_analyzed}")
    print(f"Findings:       {stats.total} "
          f"(high {stats.by_severity['high']}, medium {stats.by_severity['medium']}, "
          f"low {stats.by_severity['low']})")
    print(_format_findings(analysis))


def cmd_list_goals(args):
    for goal in GOALS:
        print(f"  {goal:<14} {GOAL_HELP[goal]}")
        for code in FOLLOWUPS_BY_GOAL[goal]:
            print(f"      --followup {code:<13} {FOLLOWUP_LABELS[code]}")


def main():
    parser = argparse.ArgumentParser(
        prog="design-council",
        description="Multi-agent design review with decision memory",
    )
    parser.add_argument("--log-level", help="Logging level (default: LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command")

    analyze_parser = subparsers.add_parser("analyze", help="Run the four-stage decision pipeline")
    analyze_parser.add_argument("--file", required=True, help="Artifact file ('-' for stdin)")
    analyze_parser.add_argument("--goal", choices=GOALS, help="Analysis goal")
    analyze_parser.add_argument("--followup", type=str.upper, help="Follow-up code for a repeat run")
    analyze_parser.add_argument("--json", action="store_true", help="Print the response as JSON")

    check_parser = subparsers.add_parser("contract-check", help="Run only the API contract analyzer")
    check_parser.add_argument("--file", required=True, help="Artifact file ('-' for stdin)")
    check_parser.add_argument("--json", action="store_true", help="Print findings as JSON")

    subparsers.add_parser("list-goals", help="List analysis goals and follow-up codes")

    args = parser.parse_args()
    configure_logging(args.log_level)

    commands = {
        "analyze": cmd_analyze,
        "contract-check": cmd_contract_check,
        "list-goals": cmd_list_goals,
    }
    if args.command not in commands:
        parser.print_help()
        sys.exit(1)

    try:
        commands[args.command](args)
    except InputValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except PipelineError as e:
        logger.debug("Pipeline run failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
