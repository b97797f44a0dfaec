"""Load and structurally validate OpenAPI documents.

Sources may be an http(s) URL or a local file, in JSON or YAML. Validation
checks the document shape and inlines every internal ``$ref``; a dangling or
external reference fails the whole document.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml

from openapi_rag_client.errors import SpecInvalidError

logger = logging.getLogger(__name__)


def load_and_validate(location: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load a document from *location* and return its validated, dereferenced tree."""
    return validate_spec(load_spec(location, timeout=timeout))


def load_spec(location: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load an OpenAPI document from a URL or file path."""
    if location.startswith(("http://", "https://")):
        return _load_from_url(location, timeout)
    return _load_from_file(Path(location))


def validate_spec(doc: Any) -> dict[str, Any]:
    """Check the document shape and return a copy with internal refs inlined."""
    if not isinstance(doc, dict):
        raise SpecInvalidError(f"Spec must be a JSON/YAML object, got {type(doc).__name__}")
    if "openapi" not in doc and "swagger" not in doc:
        raise SpecInvalidError("Spec declares neither an 'openapi' nor a 'swagger' version")
    if "info" in doc and not isinstance(doc["info"], dict):
        raise SpecInvalidError("'info' must be an object")

    root = copy.deepcopy(doc)
    resolved = _RefResolver(root).resolve(root)
    logger.info("Validated spec with %d paths", len(resolved.get("paths") or {}))
    return resolved


def _load_from_url(url: str, timeout: float) -> dict[str, Any]:
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecInvalidError(f"HTTP {exc.response.status_code} fetching spec from {url}") from exc
    except httpx.RequestError as exc:
        raise SpecInvalidError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = "json" if "json" in content_type else ""
    return _parse_content(response.text, hint)


def _load_from_file(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise SpecInvalidError(f"Spec file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecInvalidError(f"Failed to read spec file {path}: {exc}") from exc

    hint = "json" if path.suffix.lower() == ".json" else ""
    return _parse_content(text, hint)


def _parse_content(text: str, hint: str = "") -> dict[str, Any]:
    if not text.strip():
        raise SpecInvalidError("Spec document is empty")

    if hint == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SpecInvalidError(f"Invalid JSON: {exc}") from exc
    else:
        # YAML is a superset of JSON
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise SpecInvalidError(f"Invalid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise SpecInvalidError(f"Spec must be a JSON/YAML object, got {type(data).__name__}")
    return data


def _resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    if not ref.startswith("#/"):
        raise SpecInvalidError(f"External $ref not supported: {ref}")

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            raise SpecInvalidError(f"Cannot resolve $ref '{ref}': '{segment}' not found")
    return current


class _RefResolver:
    """Inlines internal refs, expanding each pointer once.

    Resolved targets are cached per pointer and shared between every site
    that references them, so a densely cross-referenced schema set costs one
    walk per pointer. A pointer met again while it is still being expanded
    is a cycle and its ref dict is kept as-is.
    """

    def __init__(self, root: dict[str, Any]):
        self.root = root
        self._resolved: dict[str, Any] = {}
        self._active: set[str] = set()

    def resolve(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            ref = obj.get("$ref")
            if isinstance(ref, str):
                return self._resolve_ref(ref, obj)
            return {key: self.resolve(value) for key, value in obj.items()}
        if isinstance(obj, list):
            return [self.resolve(item) for item in obj]
        return obj

    def _resolve_ref(self, ref: str, node: dict[str, Any]) -> Any:
        if ref in self._resolved:
            return self._resolved[ref]
        if ref in self._active:
            return node

        self._active.add(ref)
        try:
            resolved = self.resolve(_resolve_pointer(ref, self.root))
        finally:
            self._active.discard(ref)
        self._resolved[ref] = resolved
        return resolved
