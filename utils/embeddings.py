"""Voyage AI embeddings client."""

import os

import requests

from config.defaults import DEFAULTS
from core.errors import EmbeddingError


def embedding_input(artifact_text, report_text):
    """Text embedded for both similarity search and decision storage."""
    return f"{artifact_text}\n\n{report_text}"


def embed_text(text):
    """Return the embedding vector for text.

    Raises EmbeddingError on missing credentials, transport failure,
    a non-2xx status or a malformed payload. There is no fallback vector.
    """
    api_key = os.environ.get("VOYAGE_API_KEY")
    if not api_key:
        raise EmbeddingError("VOYAGE_API_KEY environment variable is not set")

    try:
        resp = requests.post(
            DEFAULTS["embedding_url"],
            headers={"Authorization": f"Bearer {api_key}"},
            json={"input": text, "model": DEFAULTS["embedding_model"]},
            timeout=DEFAULTS["embedding_timeout"],
        )
    except requests.RequestException as e:
        raise EmbeddingError(f"Voyage AI request failed: {e}") from e

    if not resp.ok:
        raise EmbeddingError(f"Voyage AI API error: {resp.status_code} - {resp.text[:200]}")

    try:
        data = resp.json()
    except ValueError as e:
        raise EmbeddingError("Invalid response from Voyage AI API: body is not JSON") from e

    items = data.get("data") if isinstance(data, dict) else None
    if not items or not isinstance(items, list):
        raise EmbeddingError("Invalid response from Voyage AI API: missing data array")

    embedding = items[0].get("embedding") if isinstance(items[0], dict) else None
    if not embedding or not isinstance(embedding, list):
        raise EmbeddingError("Invalid response from Voyage AI API: missing embedding")
    return [float(v) for v in embedding]
