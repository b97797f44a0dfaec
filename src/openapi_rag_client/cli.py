"""CLI entry point for openapi-rag-client."""

from pathlib import Path

import click
from pydantic import ValidationError

from openapi_rag_client.config import Settings
from openapi_rag_client.errors import ClientAgentError
from openapi_rag_client.generator.client import ClientGenerator
from openapi_rag_client.logging_setup import configure_logging


@click.group()
def main():
    """OpenAPI RAG client: generate grounded TypeScript API clients from OpenAPI specs."""
    pass


@main.command()
@click.option("-s", "--spec", "spec_location", required=True, help="URL or path of the OpenAPI specification.")
@click.option("-d", "--data", "data_description", required=True, help="Description of the data to retrieve.")
@click.option("-o", "--output", "output_shape", required=True, help="Desired output shape as a TypeScript interface.")
@click.option("-f", "--file", "output_file", default=None, type=click.Path(path_type=Path), help="Output file path (prints to stdout if omitted).")
@click.option("--model", default=None, help="Generation model (litellm model name).")
@click.option("--embedding-model", default=None, help="Embedding model (litellm model name).")
@click.option("--api-base", default=None, help="Base URL of the model service.")
@click.option("-k", "--top-k", type=click.IntRange(min=1), default=None, help="Number of documents to retrieve.")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None, help="Seconds allowed per model call.")
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline progress.")
def generate(
    spec_location: str,
    data_description: str,
    output_shape: str,
    output_file: Path | None,
    model: str | None,
    embedding_model: str | None,
    api_base: str | None,
    top_k: int | None,
    timeout: float | None,
    verbose: bool,
):
    """Generate a TypeScript client for the requested data."""
    configure_logging(verbose)
    try:
        settings = _settings(model, embedding_model, api_base, top_k, timeout)
    except ValidationError as exc:
        raise click.ClickException(f"Error generating client: invalid settings\n{exc}") from exc

    click.echo("Generating client code...", err=True)
    try:
        code = ClientGenerator.from_settings(settings).generate(spec_location, data_description, output_shape)
    except ClientAgentError as exc:
        error = click.ClickException(f"Error generating client: {exc}")
        error.exit_code = exc.exit_code
        raise error from exc

    if output_file:
        _write_output(output_file, code)
        click.echo(f"Client code written to {output_file}", err=True)
    else:
        click.echo(code)


def _settings(
    model: str | None,
    embedding_model: str | None,
    api_base: str | None,
    top_k: int | None,
    timeout: float | None,
) -> Settings:
    overrides = {
        "model": model,
        "embedding_model": embedding_model,
        "api_base": api_base,
        "retrieval_k": top_k,
        "timeout": timeout,
    }
    return Settings(**{key: value for key, value in overrides.items() if value is not None})


def _write_output(path: Path, code: str) -> None:
    """Write through a sibling temp file so the destination is never left half-written."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        tmp_path.write_text(code, encoding="utf-8")
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
