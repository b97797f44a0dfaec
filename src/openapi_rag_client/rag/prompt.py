"""Grounded prompt assembly.

The assembled prompt carries, in order: the retrieved context, the literal
server URL, the user's question and the fixed grounding constraints. The
constraints together with the valid-endpoint document are the only thing
steering the generator away from endpoints the spec does not declare.
"""

from pathlib import Path

from .corpus import Document
from .index import RetrievalOutcome

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

SERVER_URL_MISSING = "Not specified in the OpenAPI spec"

DEGRADED_NOTE = (
    "NOTE: API documentation retrieval failed for this request. "
    "Use only the server URL and endpoints named in the question; do not guess others."
)


def load_prompt(name: str) -> str:
    return (PROMPTS_DIR / name).read_text(encoding="utf-8")


def build_question(spec_location: str, data_description: str, output_shape: str) -> str:
    """Compose the user's request from the data description and output shape."""
    return (
        f"I need to create a TypeScript client for the API described by this OpenAPI specification: {spec_location}\n\n"
        f"I want to retrieve the following data: {data_description}\n\n"
        "The data should be transformed to match this TypeScript interface:\n"
        f"{output_shape}\n\n"
        "The code MUST include:\n"
        "- The actual API URL from the OpenAPI spec (not a placeholder)\n"
        "- A function that makes the API call (e.g. 'async function fetchData() {...}')\n"
        "- A function that transforms the response (e.g. 'function transformResponse(data) {...}')\n"
        "- All necessary type definitions\n"
        "- A usage example showing how to call the function"
    )


def format_documents(documents: list[Document]) -> str:
    return "\n\n".join(doc.content for doc in documents)


def assemble_prompt(outcome: RetrievalOutcome, server_url: str, question: str) -> str:
    """Render the grounded instruction block for the generation service."""
    context = format_documents(outcome.documents)
    if outcome.degraded:
        context = f"{context}\n\n{DEGRADED_NOTE}"

    return load_prompt("client.md").format(
        context=context,
        server_url=server_url or SERVER_URL_MISSING,
        question=question,
    )
