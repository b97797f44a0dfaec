from pathlib import Path

import pytest
import yaml

FIXTURES = Path(__file__).parent / "fixtures"

VOCABULARY = ("pet", "status", "store", "inventory", "delete", "update", "add", "category", "tag")


class KeywordEmbedder:
    """Deterministic embedder counting vocabulary substrings."""

    def __init__(self):
        self.calls: list[str] = []

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        lowered = text.lower()
        return [float(lowered.count(word)) for word in VOCABULARY]


class FailingEmbedder:
    def embed(self, text: str) -> list[float]:
        raise ConnectionError("embedding service unavailable")


class FakeLlm:
    def __init__(self, response: str = "```ts\nconst x = 1;\n```"):
        self.response = response
        self.prompts: list[str] = []

    def call(self, system: str, user: str) -> str:
        self.prompts.append(user)
        return self.response


@pytest.fixture
def petstore_path() -> Path:
    return FIXTURES / "petstore.yaml"


@pytest.fixture
def petstore_doc(petstore_path) -> dict:
    from openapi_rag_client.parser.loader import validate_spec

    return validate_spec(yaml.safe_load(petstore_path.read_text(encoding="utf-8")))


@pytest.fixture
def embedder() -> KeywordEmbedder:
    return KeywordEmbedder()


@pytest.fixture
def fake_llm() -> FakeLlm:
    return FakeLlm()
