"""Default pipeline settings."""

DEFAULTS = {
    "model": "claude-sonnet-4-5-20250929",
    "max_tokens": 2048,
    "temperature": 0.2,
    "max_response_chars": 10000,     # hard cap on a single stage response
    "summary_fallback_chars": 500,   # historian summary when output is unlabeled
    "similar_decisions_limit": 5,
    "embedding_model": "voyage-large-2",
    "embedding_url": "https://api.voyageai.com/v1/embeddings",
    "embedding_timeout": 30,
    "port": 5001,
    # No retry unless a policy says otherwise
    "retry_max_attempts": 1,
    "retry_backoff_seconds": 1.0,
    "retry_backoff_multiplier": 2.0,
}
