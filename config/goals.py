"""Analysis goals and follow-up directives."""

GOALS = ["RISKS", "IMPLEMENTABLE", "API_CONTRACT", "TEST_PLAN", "DECISION"]

GOAL_HELP = {
    "RISKS": "Scan this artifact for failure modes and risks.",
    "IMPLEMENTABLE": "Check if the design has all details needed for implementation.",
    "API_CONTRACT": "Turn this into endpoints, schemas, and error codes.",
    "TEST_PLAN": "Generate unit, integration, and load test scenarios.",
    "DECISION": "Recommend a decision with options, trade-offs, and rationale.",
}

# Emphasis added to every stage's system prompt when a goal is set.
GOAL_CONTEXT = {
    "RISKS": (
        "Prioritize failure modes, security exposure, operational risks and their "
        "likelihood and impact. Call out single points of failure."
    ),
    "IMPLEMENTABLE": (
        "Judge whether an engineer could build this as written. Focus on missing "
        "details, undefined interfaces, unclear data flow and hidden assumptions."
    ),
    "API_CONTRACT": (
        "Focus on the API contract: endpoints and HTTP methods, request/response "
        "schemas, authentication and authorization, error codes and rate limits."
    ),
    "TEST_PLAN": (
        "Focus on testability: unit, integration and load test scenarios, edge cases "
        "and the observable behaviour each test should assert."
    ),
    "DECISION": (
        "Focus on the decision to be made: viable options, decision criteria, "
        "trade-offs between options and a clear recommendation."
    ),
}

FOLLOWUPS_BY_GOAL = {
    "RISKS": ["MITIGATIONS", "PRIORITIZE", "ACTION_ITEMS"],
    "IMPLEMENTABLE": ["DETAILS", "CHECKLIST"],
    "API_CONTRACT": ["AUTH", "ERROR_CODES", "EXAMPLES"],
    "TEST_PLAN": ["EDGE_CASES", "LOAD_TESTS"],
    "DECISION": ["COMPARE", "RATIONALE"],
}

FOLLOWUP_LABELS = {
    "MITIGATIONS": "Add Mitigations",
    "PRIORITIZE": "Prioritize by Severity",
    "ACTION_ITEMS": "Turn into Action Items",
    "DETAILS": "Add Missing Details",
    "CHECKLIST": "Create Checklist",
    "AUTH": "Add Auth + Rate Limiting",
    "ERROR_CODES": "Add Error Codes",
    "EXAMPLES": "Generate Example Payloads",
    "EDGE_CASES": "Add Edge Cases",
    "LOAD_TESTS": "Add Load Tests",
    "COMPARE": "Compare Options",
    "RATIONALE": "Add Rationale",
}

# Narrows the goal on a repeat run. Layered beneath the goal context.
FOLLOWUP_CONTEXT = {
    "MITIGATIONS": "Propose concrete mitigation strategies for each risk you identify.",
    "PRIORITIZE": "Rank every issue by severity (high, medium, low) and address the highest first.",
    "ACTION_ITEMS": "Turn the findings into a numbered list of actionable, owner-ready tasks.",
    "DETAILS": "Fill in the missing implementation details the design leaves open.",
    "CHECKLIST": "Produce an implementation checklist an engineer can tick off step by step.",
    "AUTH": "Define authentication, authorization and rate limiting for every endpoint.",
    "ERROR_CODES": "Specify the error responses and HTTP status codes for every endpoint.",
    "EXAMPLES": "Provide example request and response payloads for the key endpoints.",
    "EDGE_CASES": "Enumerate edge cases and boundary conditions with a test for each.",
    "LOAD_TESTS": "Design load and performance test scenarios with target thresholds.",
    "COMPARE": "Compare the available options side by side against explicit criteria.",
    "RATIONALE": "Expand the reasoning behind the recommended decision in depth.",
}

REPORT_TITLES = {
    "RISKS": "Risk Scan Report",
    "IMPLEMENTABLE": "Implementation Readiness Check",
    "API_CONTRACT": "API Contract Analysis",
    "TEST_PLAN": "Test Coverage Assessment",
    "DECISION": "Decision Context Analysis",
}
