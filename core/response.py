"""Response assembly: map a finished run onto the outward JSON contract."""

from core.state import RunOutcome


def to_iso(dt):
    return dt.isoformat() if dt else None


def decision_to_dict(decision):
    return {
        "summary": decision.summary,
        "rationale": decision.rationale,
        "createdAt": to_iso(decision.created_at),
    }


def findings_to_dict(analysis):
    """The findings block: aggregate statistics plus the full analyzer result."""
    raw = analysis.to_dict()
    return {"statistics": raw["metadata"]["statistics"], "raw": raw}


def assemble_response(outcome: RunOutcome):
    """Build {toolReport, agentMessages, decisions, findings?} for one run.

    agentMessages keep execution order: analysis, review, tradeoff, historian.
    findings is present only when the contract analyzer ran.
    """
    response = {
        "toolReport": outcome.tool_report,
        "agentMessages": [
            {
                "agentRole": msg.agent_role,
                "message": msg.message,
                "createdAt": to_iso(msg.created_at),
            }
            for msg in outcome.agent_messages
        ],
        "decisions": [decision_to_dict(outcome.decision)],
    }
    if outcome.contract_analysis is not None:
        response["findings"] = findings_to_dict(outcome.contract_analysis)
    return response
