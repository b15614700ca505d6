"""
JSON Utilities for LLM Response Parsing.

Provider output is parsed strictly: the payload is either the whole
response or the contents of the first markdown code fence. Anything that
does not decode, or decodes to the wrong shape, raises
MalformedProviderResponse so the caller can fall through to the next
provider instead of returning a half-guessed result.
"""

import json
import re
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from src.common.error_handling import MalformedProviderResponse

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCE_RE = re.compile(r"```(?:json|JSON)?[ \t]*\r?\n?(.*?)```", re.DOTALL)


def parse_llm_json(text: str) -> Any:
    """
    Parse JSON from an LLM response.

    Handles:
    - Bare JSON (object or array)
    - Markdown code blocks (```json ... ``` or ``` ... ```), with or
      without prose around the fence

    Args:
        text: Raw LLM response text

    Returns:
        The decoded JSON value

    Raises:
        MalformedProviderResponse: If the payload is empty or not valid JSON

    Example:
        >>> parse_llm_json('```json\\n{"key": "value"}\\n```')
        {'key': 'value'}
    """
    if not text or not text.strip():
        raise MalformedProviderResponse("Empty response: no JSON content to parse", raw=text)

    payload = _strip_markdown_blocks(text.strip())
    if not payload:
        raise MalformedProviderResponse("Code block was empty", raw=text)

    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedProviderResponse(
            f"Response is not valid JSON: {e.msg} at line {e.lineno} column {e.colno}",
            raw=text,
        )


def parse_json_object(text: str, model: Type[ModelT]) -> ModelT:
    """
    Parse a JSON object and validate it against a pydantic model.

    Raises:
        MalformedProviderResponse: On parse failure, non-object payload,
            or a payload that fails model validation
    """
    data = parse_llm_json(text)
    if not isinstance(data, dict):
        raise MalformedProviderResponse(
            f"Expected a JSON object, got {type(data).__name__}", raw=text
        )
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedProviderResponse(
            f"{model.__name__} shape mismatch: {_summarize(e)}", raw=text
        )


def parse_json_array(text: str, item_model: Type[ModelT]) -> List[ModelT]:
    """
    Parse a JSON array whose items must each validate against item_model.

    Raises:
        MalformedProviderResponse: On parse failure, non-array payload,
            or any item that fails validation
    """
    data = parse_llm_json(text)
    if not isinstance(data, list):
        raise MalformedProviderResponse(
            f"Expected a JSON array, got {type(data).__name__}", raw=text
        )
    try:
        return TypeAdapter(List[item_model]).validate_python(data)
    except ValidationError as e:
        raise MalformedProviderResponse(
            f"{item_model.__name__} list shape mismatch: {_summarize(e)}", raw=text
        )


def _strip_markdown_blocks(text: str) -> str:
    """
    Return the contents of the first fenced code block, or text unchanged.

    Args:
        text: Text that may contain a markdown code block

    Returns:
        The fenced payload, stripped
    """
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text


def _summarize(error: ValidationError) -> str:
    """First few validation problems as one line."""
    parts: List[str] = []
    for item in error.errors()[:3]:
        location = ".".join(str(p) for p in item.get("loc", ())) or "<root>"
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)


def to_plain(items: List[BaseModel]) -> List[Dict[str, Any]]:
    """Dump validated models back to JSON-ready dictionaries."""
    return [item.model_dump() for item in items]
