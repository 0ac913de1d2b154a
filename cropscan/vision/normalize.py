"""ResponseNormalizer — pull one analysis string out of any provider response.

Every accessor tolerates any JSON-like shape: a missing key or a value of the
wrong type just means "no text here". Top-level items are joined by a blank
line, sub-items of one item by a single space.
"""
from typing import Any, Callable, Optional

from cropscan.constants import (
    FALLBACK_ANALYSIS,
    ITEM_SEPARATOR,
    PROVIDER_CLAUDE,
    PROVIDER_GEMINI,
    PROVIDER_OPENAI_CHAT,
    PROVIDER_OPENAI_RESPONSES,
    SUB_ITEM_SEPARATOR,
)


def _get(node: Any, key: str) -> Any:
    return node.get(key) if isinstance(node, dict) else None


def _own_text(node: Any) -> str:
    match node:
        case str():
            return node.strip()
        case {"text": str() as text}:
            return text.strip()
        case _:
            return ""


def _join(fragments: list[str], separator: str) -> str:
    return separator.join(f for f in fragments if f)


def _sub_items(item: Any) -> Any:
    """Nested block list of one item: content[], content.parts[], parts[], message.content."""
    for nested in (
        _get(item, "content"),
        _get(_get(item, "content"), "parts"),
        _get(item, "parts"),
        _get(_get(item, "message"), "content"),
    ):
        if isinstance(nested, (list, str)):
            return nested
    return None


def _item_text(item: Any) -> str:
    own = _own_text(item)
    if own:
        return own
    match _sub_items(item):
        case str() as text:
            return text.strip()
        case list() as blocks:
            return _join([_own_text(b) for b in blocks], SUB_ITEM_SEPARATOR)
        case _:
            return ""


def _blocks(value: Any) -> str:
    match value:
        case str():
            return value.strip()
        case list():
            return _join([_item_text(item) for item in value], ITEM_SEPARATOR)
        case _:
            return ""


def _string(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


Extractor = Callable[[Any], str]


def _string_field(key: str) -> Extractor:
    return lambda response: _string(_get(response, key))


def _blocks_field(*path: str) -> Extractor:
    def extract(response: Any) -> str:
        node = response
        for key in path:
            node = _get(node, key)
        return _blocks(node)

    return extract


_COMPLETION = _string_field("completion")
_OUTPUT_TEXT = _string_field("output_text")
_MESSAGE_CONTENT = _blocks_field("message", "content")
_CONTENT = _blocks_field("content")
_OUTPUT = _blocks_field("output")
_CHOICES = _blocks_field("choices")
_CANDIDATES = _blocks_field("candidates")

_DOCUMENTED: dict[str, tuple[Extractor, ...]] = {
    PROVIDER_CLAUDE: (_COMPLETION, _CONTENT, _MESSAGE_CONTENT),
    PROVIDER_OPENAI_CHAT: (_CHOICES,),
    PROVIDER_OPENAI_RESPONSES: (_OUTPUT_TEXT, _OUTPUT),
    PROVIDER_GEMINI: (_CANDIDATES,),
}

_GENERIC: tuple[Extractor, ...] = (
    _COMPLETION,
    _OUTPUT_TEXT,
    _MESSAGE_CONTENT,
    _CONTENT,
    _OUTPUT,
    _CHOICES,
    _CANDIDATES,
)


def extract_analysis(response: Any, provider: Optional[str] = None) -> str:
    """Return the provider's analysis text, or FALLBACK_ANALYSIS. Never raises."""
    for extractor in (*_DOCUMENTED.get(provider or "", ()), *_GENERIC):
        text = extractor(response)
        if text:
            return text
    return FALLBACK_ANALYSIS
