#!/usr/bin/env python3
"""Design Council - HTTP front end for the decision pipeline."""

import logging
import os

from flask import Flask, jsonify, request

from agents.contract_analyzer import ContractAnalyzer
from config.defaults import DEFAULTS
from config.goals import FOLLOWUP_LABELS, FOLLOWUPS_BY_GOAL, GOAL_HELP, GOALS
from core.errors import InputValidationError, PipelineError
from core.orchestrator import Orchestrator
from core.response import assemble_response, decision_to_dict, to_iso
from manager.directives import parse_directives, validate_artifact
from utils.log import configure_logging

logger = logging.getLogger(__name__)

app = Flask(__name__)
orchestrator = Orchestrator()
analyzer = ContractAnalyzer()

_MAX_DECISIONS = 50


def _artifact_from_request():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    return validate_artifact(data.get("artifactContent"))


@app.route("/api/agents")
def api_agents():
    agents = [{"name": s.name, "description": s.description} for s in orchestrator.stages]
    agents.append({"name": analyzer.name, "description": "Deterministic API contract checks (no LLM)"})
    return jsonify(agents)


@app.route("/api/goals")
def api_goals():
    return jsonify([
        {
            "goal": goal,
            "helpText": GOAL_HELP[goal],
            "followups": [
                {"code": code, "label": FOLLOWUP_LABELS[code]}
                for code in FOLLOWUPS_BY_GOAL[goal]
            ],
        }
        for goal in GOALS
    ])


@app.route("/api/analyze", methods=["POST"])
def api_analyze():
    """Run the full pipeline. Success carries the complete chain; failure carries only an error."""
    try:
        raw = _artifact_from_request()
        outcome = orchestrator.run_full(raw)
    except InputValidationError as e:
        return jsonify({"error": str(e)}), 400
    except PipelineError as e:
        logger.exception("Pipeline run failed")
        return jsonify({"error": str(e)}), 502
    except Exception:
        logger.exception("Unexpected error in /api/analyze")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(assemble_response(outcome))


@app.route("/api/contract-check", methods=["POST"])
def api_contract_check():
    """Contract analyzer only. No reasoning, embedding or storage calls."""
    try:
        directive = parse_directives(_artifact_from_request())
    except InputValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(analyzer.run(directive.cleaned_text).to_dict())


@app.route("/api/decisions")
def api_decisions():
    limit = request.args.get("limit", default=10, type=int)
    limit = max(1, min(limit, _MAX_DECISIONS))
    return jsonify([
        {**decision_to_dict(d), "artifactId": d.artifact_id}
        for d in orchestrator.memory.recent_decisions(limit)
    ])


@app.route("/api/artifacts/<artifact_id>")
def api_artifact(artifact_id):
    """A stored artifact with every tool report and agent message recorded for it."""
    memory = orchestrator.memory
    artifact = memory.artifact(artifact_id)
    if artifact is None:
        return jsonify({"error": "Artifact not found"}), 404

    messages = memory.messages_for(artifact_id)
    report_ids = list(dict.fromkeys(m["reportId"] for m in messages))
    reports = []
    for report_id in report_ids:
        report = memory.report(report_id)
        if report is not None:
            reports.append({
                "id": report_id,
                "rawReport": report["rawReport"],
                "createdAt": to_iso(report["createdAt"]),
            })

    return jsonify({
        "id": artifact_id,
        "content": artifact["content"],
        "createdAt": to_iso(artifact["createdAt"]),
        "updatedAt": to_iso(artifact["updatedAt"]),
        "reports": reports,
        "agentMessages": [
            {
                "agentRole": m["agentRole"],
                "message": m["message"],
                "createdAt": to_iso(m["createdAt"]),
                "reportId": m["reportId"],
            }
            for m in messages
        ],
    })


if __name__ == "__main__":
    configure_logging()
    port = int(os.environ.get("PORT", DEFAULTS["port"]))
    print(f"Design Council running at http://localhost:{port}")
    app.run(debug=False, port=port)
