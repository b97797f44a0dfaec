"""Exception hierarchy for openapi-rag-client.

Fatal errors derive from ClientAgentError and abort the pipeline. A failed
retrieval is not an exception: it is reported through RetrievalOutcome.degraded.
"""


class ClientAgentError(Exception):
    """Base class for fatal pipeline errors."""

    exit_code: int = 1


class SpecInvalidError(ClientAgentError):
    """The OpenAPI document could not be loaded or failed structural validation."""


class MalformedSpecError(SpecInvalidError):
    """A validated document is missing members the normalizer requires."""


class GenerationFailure(ClientAgentError):
    """The generation service call failed or timed out."""
