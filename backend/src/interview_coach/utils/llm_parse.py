"""LLM output parsing utilities.

Shared helpers for locating the generated text inside a provider response
envelope and for extracting JSON from free-form model output.
"""

import json
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

_JSON_BLOCK_RE = re.compile(r"{[\s\S]*}")

_MISSING = object()


# ------------------------------------------------------------------ #
#  Response text extraction
# ------------------------------------------------------------------ #


def _lookup(node: Any, key: str | int) -> Any:
    """Step into a dict key, list index or object attribute; _MISSING if absent."""
    if node is None:
        return _MISSING
    if isinstance(key, int):
        if isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
            return node[key] if -len(node) <= key < len(node) else _MISSING
        return _MISSING
    if isinstance(node, dict):
        return node.get(key, _MISSING)
    return getattr(node, key, _MISSING)


def _path(*keys: str | int) -> Callable[[Any], Any]:
    def strategy(response: Any) -> Any:
        node = response
        for key in keys:
            node = _lookup(node, key)
            if node is _MISSING:
                return None
        return node

    return strategy


def _plain_string(response: Any) -> Any:
    return response if isinstance(response, str) else None


# First match wins. Add new provider shapes here.
TEXT_STRATEGIES: list[Callable[[Any], Any]] = [
    _path("candidates", 0, "content", "parts", 0, "text"),
    _path("candidates", 0, "content", "text"),
    _path("output", 0, "content", 0, "text"),
    _plain_string,
    _path("text"),
]


def extract_text(response: Any) -> str | None:
    """Return the model's generated text from a provider response, or None.

    Never raises: response shapes vary across provider versions, so a failed
    lookup just moves on to the next strategy.
    """
    for strategy in TEXT_STRATEGIES:
        try:
            text = strategy(response)
        except Exception:
            continue
        if isinstance(text, str) and text:
            return text
    return None


def top_level_keys(response: Any, limit: int = 20) -> list[str]:
    """Debug helper: the first ``limit`` top-level keys of a response."""
    if isinstance(response, dict):
        keys = list(response)
    elif hasattr(response, "__dict__"):
        keys = list(vars(response))
    else:
        keys = []
    return [str(k) for k in keys[:limit]]


# ------------------------------------------------------------------ #
#  Tolerant JSON parsing
# ------------------------------------------------------------------ #


@dataclass(frozen=True)
class ParseSuccess:
    data: Any


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    raw: str


ParseOutcome = ParseSuccess | ParseFailure

NO_TEXT = "no text to parse"
BROKEN_BLOCK = "found JSON-like block but failed to parse"
NOT_JSON = "response is not valid JSON"


def parse_json(text: Any) -> ParseOutcome:
    """Parse model output as JSON, falling back to the outermost ``{...}`` block.

    Models often wrap the requested JSON in prose or markdown fences; the
    fallback picks the span from the first ``{`` to the last ``}``.
    """
    if not text or not isinstance(text, str):
        return ParseFailure(NO_TEXT, "")

    try:
        return ParseSuccess(json.loads(text))
    except json.JSONDecodeError:
        pass

    match = _JSON_BLOCK_RE.search(text)
    if match is None:
        return ParseFailure(NOT_JSON, text)

    block = match.group(0)
    try:
        return ParseSuccess(json.loads(block))
    except json.JSONDecodeError:
        return ParseFailure(BROKEN_BLOCK, block)
