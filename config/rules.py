"""Contract analysis vocabulary and rule tables."""

import re

# Rules run in this order, each emitting at most one finding.
CONTRACT_RULE_ORDER = [
    "endpoint_methods",
    "status_codes",
    "schemas",
    "auth",
    "cache_invalidation",
    "ambiguous_endpoints",
    "rate_limiting",
    "error_handling",
]

# Path-like tokens ("/users/{id}") and HTTP verbs, used line by line.
ENDPOINT_TOKEN = re.compile(r"/[a-zA-Z0-9/\-_?={}]+")
HTTP_METHOD = re.compile(r"\b(get|post|put|patch|delete|head|options)\b", re.IGNORECASE)
# A "VERB /path" pair anywhere in the document.
METHOD_WITH_PATH = re.compile(r"\b(get|post|put|patch|delete)\s+/[a-zA-Z0-9/\-_]+", re.IGNORECASE)

ENDPOINT_OR_API = re.compile(r"(endpoint|api|route|path|/[a-zA-Z0-9/\-_]+)", re.IGNORECASE)
API_DESCRIPTION = re.compile(r"(endpoint|api|request|response|post|put|patch)", re.IGNORECASE)
STATUS_CODE = re.compile(r"\b(200|201|202|204|400|401|403|404|409|422|500|502|503)\b")
SCHEMA_WORDS = re.compile(
    r"(schema|request|response|body|payload|dto|model|type|interface|structure)", re.IGNORECASE
)
AUTH_WORDS = re.compile(
    r"(auth|authentication|authorization|jwt|token|bearer|api.?key|oauth|security|permission|role)",
    re.IGNORECASE,
)
CACHE_WORDS = re.compile(r"(cache|caching|redis|memcached|ttl)", re.IGNORECASE)
INVALIDATION_WORDS = re.compile(
    r"(invalidation|invalidate|evict|expire|purge|clear|refresh|stale)", re.IGNORECASE
)
RATE_LIMIT_WORDS = re.compile(
    r"(rate.?limit|throttle|quota|rps|requests.?per.?second|qps)", re.IGNORECASE
)
ERROR_WORDS = re.compile(r"(error|exception|failure|status.?code|4[0-9]{2}|5[0-9]{2})", re.IGNORECASE)

# "Endpoint: /users" with a single path segment and nothing after it.
AMBIGUOUS_ENDPOINT = re.compile(r"endpoint[^:]*:\s*/[^/\n]*(?:\n|\Z)", re.IGNORECASE)

MARKDOWN_HEADER = re.compile(r"^(#{1,6})\s+(.+)$")

# Vocabulary rules: fire when the trigger matches and the required vocabulary does not.
# Each entry: rule_id -> (trigger, required, category, severity, rule_name, evidence)
VOCABULARY_RULES = {
    "status_codes": (
        ENDPOINT_OR_API,
        STATUS_CODE,
        "missing",
        "medium",
        "Missing response status codes",
        "No HTTP status codes found (e.g., 200, 400, 404) in artifact",
    ),
    "schemas": (
        API_DESCRIPTION,
        SCHEMA_WORDS,
        "missing",
        "high",
        "Missing request/response schemas",
        "No schema, request/response, or type definitions found",
    ),
    "auth": (
        ENDPOINT_OR_API,
        AUTH_WORDS,
        "missing",
        "high",
        "Missing authentication/authorization definition",
        "No authentication or authorization mechanisms defined",
    ),
    "cache_invalidation": (
        CACHE_WORDS,
        INVALIDATION_WORDS,
        "missing",
        "medium",
        "Caching mentioned without invalidation strategy",
        "Caching is mentioned but no invalidation strategy is defined",
    ),
    "rate_limiting": (
        ENDPOINT_OR_API,
        RATE_LIMIT_WORDS,
        "risk",
        "low",
        "Rate limiting not mentioned",
        "No rate limiting or throttling strategy defined",
    ),
    "error_handling": (
        ENDPOINT_OR_API,
        ERROR_WORDS,
        "risk",
        "medium",
        "Error handling not defined",
        "No error response formats or status codes defined",
    ),
}

ENDPOINT_METHODS_RULE = "Endpoints mentioned without HTTP methods"
AMBIGUOUS_ENDPOINTS_RULE = "Endpoint definitions may be incomplete or ambiguous"

MAX_ENDPOINT_EVIDENCE = 5
MAX_AMBIGUOUS_EVIDENCE = 3
AMBIGUOUS_EXCERPT_CHARS = 80
