"""Pipeline error taxonomy.

Every error a caller can see derives from PipelineError. Fatal errors abort
the run before anything is persisted; SimilaritySearchError is the one the
orchestrator catches and degrades on.
"""


class PipelineError(Exception):
    """Base class for all pipeline failures."""


class InputValidationError(PipelineError):
    """Artifact rejected before any external call."""


class EmptyArtifactError(InputValidationError):
    """Nothing left of the artifact once directive markers are stripped."""


class ExternalAgentError(PipelineError):
    """A reasoning call failed or returned unusable content."""

    def __init__(self, stage, message):
        self.stage = stage
        self.message = message
        super().__init__(f"[{stage}] {message}" if stage else message)


class ResponseTooLargeError(ExternalAgentError):
    """Stage response exceeded the character cap."""


class HistorianOutputInvalidError(ExternalAgentError):
    """Historian output normalized to an empty summary or rationale."""

    def __init__(self, message):
        super().__init__("historian", message)


class EmbeddingError(PipelineError):
    """Embedding generation failed. Fatal: there is no fallback vector."""


class SimilaritySearchError(PipelineError):
    """Nearest-neighbour lookup failed. Degrades to no similar decisions."""
