"""In-process decision memory: artifacts, reports, agent messages and decisions.

Stands in for the document store and vector index. Safe to share between
request threads; every read and write happens under one lock.
"""

import math
import threading
import uuid

from config.defaults import DEFAULTS
from core.errors import SimilaritySearchError
from core.state import SimilarDecision


def cosine_similarity(a, b):
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if not norm_a or not norm_b:
        return 0.0
    return dot / (norm_a * norm_b)


def _new_id():
    return str(uuid.uuid4())


class DecisionMemory:
    """Stores pipeline output and answers nearest-decision queries.

    Args:
        vector_index: when False, similarity search fails the way a
                      missing search index does.
    """

    def __init__(self, vector_index=True):
        self.vector_index = vector_index
        self._lock = threading.Lock()
        self._artifacts = {}        # id -> {"content", "createdAt", "updatedAt"}
        self._reports = {}          # id -> {"artifactId", "rawReport", "createdAt"}
        self._messages = []         # dicts in insertion order
        self._decisions = []        # Decision objects in insertion order

    def save_run(self, content, raw_report, messages, decision, now):
        """Persist one finished run as a unit. Returns the decision id.

        The artifact is matched on content: a repeat only touches updatedAt.
        Every record is built before any is stored, so a bad message or
        decision leaves the memory unchanged. Decisions are never updated
        once saved.
        """
        with self._lock:
            artifact_id = next(
                (aid for aid, a in self._artifacts.items() if a["content"] == content), None
            )
            is_new_artifact = artifact_id is None
            if is_new_artifact:
                artifact_id = _new_id()

            report_id = _new_id()
            report = {"artifactId": artifact_id, "rawReport": raw_report, "createdAt": now}
            rows = [
                {
                    "_id": _new_id(),
                    "artifactId": artifact_id,
                    "reportId": report_id,
                    "agentRole": msg.agent_role,
                    "message": msg.message,
                    "createdAt": msg.created_at,
                }
                for msg in messages
            ]
            decision_id = decision.id or _new_id()
            if len(decision.embedding) == 0:
                raise ValueError("Decision has no embedding")

            if is_new_artifact:
                self._artifacts[artifact_id] = {"content": content, "createdAt": now, "updatedAt": now}
            else:
                self._artifacts[artifact_id]["updatedAt"] = now
            self._reports[report_id] = report
            self._messages.extend(rows)
            decision.id = decision_id
            decision.artifact_id = artifact_id
            self._decisions.append(decision)
            return decision_id

    def find_similar(self, embedding, limit=None):
        """Past decisions ordered by cosine similarity, most similar first."""
        limit = limit or DEFAULTS["similar_decisions_limit"]
        if not self.vector_index:
            raise SimilaritySearchError("Vector search index is not available")

        with self._lock:
            decisions = list(self._decisions)

        scored = []
        for d in decisions:
            if len(d.embedding) != len(embedding):
                raise SimilaritySearchError(
                    f"Embedding dimension mismatch: query has {len(embedding)}, "
                    f"stored decision has {len(d.embedding)}"
                )
            scored.append((cosine_similarity(embedding, d.embedding), d))

        # Stable sort keeps insertion order among equal scores
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [
            SimilarDecision(summary=d.summary, rationale=d.rationale, score=score, created_at=d.created_at)
            for score, d in scored[:limit]
        ]

    def recent_decisions(self, limit=10):
        with self._lock:
            return list(reversed(self._decisions))[:limit]

    def messages_for(self, artifact_id):
        with self._lock:
            return [m for m in self._messages if m["artifactId"] == artifact_id]

    def artifact(self, artifact_id):
        with self._lock:
            return self._artifacts.get(artifact_id)

    def report(self, report_id):
        with self._lock:
            return self._reports.get(report_id)
