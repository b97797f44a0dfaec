"""Post-processing of raw generation output."""

import logging
import re

logger = logging.getLogger(__name__)

HEADER = "// Generated TypeScript client for API"

_FENCE = re.compile(r"```(?:[^\n`]*\n)?(.*?)```", re.DOTALL)


def extract_code(response: str) -> str:
    """Return the first fenced code block, or the whole trimmed response."""
    match = _FENCE.search(response)
    if match:
        return match.group(1).strip()
    logger.info("No fenced code block in generated output, using raw text")
    return response.strip()


def format_generated_code(response: str) -> str:
    """Extract the code and prepend the standard header comment."""
    return f"{HEADER}\n\n{extract_code(response)}"
