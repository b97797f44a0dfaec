"""LLM and embedding clients wrapping litellm.

Provides a unified interface for calling any generation or embedding model
supported by litellm. Both clients make one blocking call per request and
never retry.
"""

from litellm import completion, embedding

from openapi_rag_client.config import DEFAULT_EMBEDDING_MODEL, DEFAULT_MODEL


class LlmClient:
    """Wrapper for LLM API calls via litellm."""

    def __init__(
        self,
        model: str | None = None,
        timeout: float = 120.0,
        max_tokens: int = 4000,
        api_base: str | None = None,
    ):
        self.model = model or DEFAULT_MODEL
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.api_base = api_base

    def call(self, system: str, user: str) -> str:
        """Send a system+user message to the LLM and return the response text."""
        response = completion(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            max_tokens=self.max_tokens,
            timeout=self.timeout,
            api_base=self.api_base,
        )
        return response.choices[0].message.content or ""


class EmbeddingClient:
    """Wrapper for embedding API calls via litellm."""

    def __init__(
        self,
        model: str | None = None,
        timeout: float = 120.0,
        api_base: str | None = None,
    ):
        self.model = model or DEFAULT_EMBEDDING_MODEL
        self.timeout = timeout
        self.api_base = api_base

    def embed(self, text: str) -> list[float]:
        """Embed a single string and return its vector."""
        response = embedding(
            model=self.model,
            input=[text],
            timeout=self.timeout,
            api_base=self.api_base,
        )
        item = response.data[0]
        # litellm returns dicts for most providers, objects for some
        if isinstance(item, dict):
            return list(item["embedding"])
        return list(item.embedding)
