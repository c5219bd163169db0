"""Read specification, mapping and example documents.

A source is a local path, an ``http(s)://`` URL or ``-`` for stdin. JSON is
attempted first and YAML second, unless a ``.json``/``.yaml`` suffix or the
response content type settles the format. YAML is read into the same values
JSON would give: string keys, and no dates.

:func:`load_document` accepts any JSON value, as examples can be arrays or
scalars. :func:`load_spec` additionally insists on an object.

A path that is not a file raises
:class:`~specex.exceptions.DocumentNotFoundError`; every other failure
raises :class:`~specex.exceptions.DocumentParseError`.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specex.exceptions import DocumentNotFoundError, DocumentParseError

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _DocumentLoader(yaml.SafeLoader):
    """SafeLoader that only produces JSON values.

    Mapping keys become strings (``200:`` is the key ``"200"``) and dates
    stay the strings they were written as.
    """

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[str, Any]:
        mapping = super().construct_mapping(node, deep=deep)
        return {_key_to_str(key): value for key, value in mapping.items()}


_DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _key_to_str(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def load_document(source: str) -> Any:
    """Read and parse the document at *source*.

    Returns:
        The parsed value, of any JSON type.

    Raises:
        DocumentNotFoundError: If *source* is a file path that does not exist.
        DocumentParseError: If the source cannot be read or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def load_spec(source: str) -> dict[str, Any]:
    """Load a document that must be a JSON/YAML object.

    Used for specification documents and mapping files.

    Raises:
        DocumentNotFoundError: If *source* is a file path that does not exist.
        DocumentParseError: If the source cannot be parsed or is not an object.
    """
    result = load_document(source)
    if not isinstance(result, dict):
        raise DocumentParseError(
            f"Document must be a JSON/YAML object (got {_type_name(result)}): {source}",
            params={"path": source},
        )
    return result


def _load_from_stdin() -> Any:
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise DocumentParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise DocumentParseError("No input received from stdin")

    return _parse_content(content, source="stdin")


def _load_from_url(url: str) -> Any:
    """GET *url*, following redirects, and parse the body."""
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentParseError(
            f"HTTP {exc.response.status_code} fetching document from {url}",
            params={"path": url},
        ) from exc
    except httpx.RequestError as exc:
        raise DocumentParseError(
            f"Failed to fetch document from {url}: {exc}", params={"path": url}
        ) from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, source=url, hint=hint)


def _load_from_file(path: str) -> Any:
    """Load a document from a local file.

    ``.json`` files are parsed strictly as JSON, ``.yaml``/``.yml`` as YAML;
    any other extension falls back to content-based detection.

    Raises:
        DocumentNotFoundError: If the file does not exist.
        DocumentParseError: If the file cannot be read or parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentNotFoundError(path)

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentParseError(
            f"Failed to read file {path}: {exc}", params={"path": path}
        ) from exc

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, source=path, hint=hint)


def _parse_content(content: str, source: str, hint: str = "") -> Any:
    """Decode *content*, trying JSON before YAML.

    Args:
        content: Raw text.
        source: Where *content* came from; named in errors.
        hint: ``"json"`` parses JSON only, ``"yaml"`` skips JSON.

    Raises:
        DocumentParseError: If the content cannot be parsed as either format.
    """
    if not content.strip():
        raise DocumentParseError(f"Document is empty: {source}", params={"path": source})

    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise DocumentParseError(
                    f"Invalid JSON in {source}: {exc}", params={"path": source}
                ) from exc

    try:
        return yaml.load(content, Loader=_DocumentLoader)
    except yaml.YAMLError as exc:
        msg = f"Failed to parse {source} as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise DocumentParseError(msg, params={"path": source}) from exc


def _type_name(value: Any) -> str:
    if value is None:
        return "empty document"
    return type(value).__name__
