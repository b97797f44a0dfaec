"""Client generator: the end-to-end retrieval-grounded pipeline.

normalize -> build corpus -> embed -> retrieve -> assemble prompt -> generate -> extract

Each call builds its own corpus and index; nothing is shared between calls.
"""

import logging
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from openapi_rag_client.config import Settings
from openapi_rag_client.errors import GenerationFailure
from openapi_rag_client.generator.extract import format_generated_code
from openapi_rag_client.llm import EmbeddingClient, LlmClient
from openapi_rag_client.parser.base import NormalizedSpec
from openapi_rag_client.parser.loader import load_and_validate
from openapi_rag_client.parser.swagger import normalize
from openapi_rag_client.rag.corpus import DEFAULT_SCHEMA_CAP, build_corpus
from openapi_rag_client.rag.index import DEFAULT_K, Embedder, RetrievalOutcome, Retriever
from openapi_rag_client.rag.prompt import assemble_prompt, build_question, load_prompt

logger = logging.getLogger(__name__)


@runtime_checkable
class TextGenerator(Protocol):
    def call(self, system: str, user: str) -> str: ...


class PipelineConfig(BaseModel):
    """Injected backends and limits for one pipeline."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    embedder: Embedder
    llm: TextGenerator
    retrieval_k: int = Field(default=DEFAULT_K, ge=1)
    schema_cap: int = Field(default=DEFAULT_SCHEMA_CAP, ge=0)
    spec_timeout: float = 30.0


class GenerationResult(BaseModel):
    outcome: RetrievalOutcome
    prompt: str
    raw: str
    code: str


class ClientGenerator:
    """Generates a TypeScript client from an OpenAPI document and a data request."""

    def __init__(self, config: PipelineConfig):
        self.config = config

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ClientGenerator":
        settings = settings or Settings()
        return cls(
            PipelineConfig(
                embedder=EmbeddingClient(
                    model=settings.embedding_model,
                    timeout=settings.timeout,
                    api_base=settings.api_base,
                ),
                llm=LlmClient(
                    model=settings.model,
                    timeout=settings.timeout,
                    max_tokens=settings.max_tokens,
                    api_base=settings.api_base,
                ),
                retrieval_k=settings.retrieval_k,
                schema_cap=settings.schema_cap,
                spec_timeout=settings.spec_timeout,
            )
        )

    def generate(self, spec_location: str, data_description: str, output_shape: str) -> str:
        """Load the spec at *spec_location* and return generated client source."""
        doc = load_and_validate(spec_location, timeout=self.config.spec_timeout)
        return self.generate_from_document(doc, spec_location, data_description, output_shape)

    def generate_from_document(
        self,
        doc: dict[str, Any],
        spec_location: str,
        data_description: str,
        output_shape: str,
    ) -> str:
        spec = normalize(doc)
        question = build_question(spec_location, data_description, output_shape)
        return self.run_rag(spec, question).code

    def run_rag(self, spec: NormalizedSpec, question: str) -> GenerationResult:
        documents = build_corpus(spec, schema_cap=self.config.schema_cap)

        retriever = Retriever(self.config.embedder, k=self.config.retrieval_k)
        retriever.index(documents)
        outcome = retriever.retrieve(question)
        if outcome.degraded:
            logger.warning("Continuing with degraded context: %s", outcome.error)
        else:
            logger.info("Retrieved %d documents", len(outcome.documents))

        prompt = assemble_prompt(outcome, spec.info.server_url, question)
        raw = self._call_llm(prompt)
        return GenerationResult(outcome=outcome, prompt=prompt, raw=raw, code=format_generated_code(raw))

    def _call_llm(self, prompt: str) -> str:
        try:
            return self.config.llm.call(system=load_prompt("system.md"), user=prompt)
        except Exception as exc:
            raise GenerationFailure(f"Generation failed: {exc}") from exc
