"""
Shape checks for the generateContent response envelope.
"""

from typing import Any

from core.errors import InvalidUpstreamStructure


def _first(container: Any, key: str, path: str) -> Any:
    items = container.get(key) if isinstance(container, dict) else None
    if not isinstance(items, list) or not items:
        raise InvalidUpstreamStructure(path)
    return items[0]


def extract_generated_text(envelope: Any) -> str:
    """
    Return ``candidates[0].content.parts[0].text``.

    Raises:
        InvalidUpstreamStructure: Naming the first field that is absent or of
            the wrong type
    """
    candidate = _first(envelope, "candidates", "candidates")

    content = candidate.get("content") if isinstance(candidate, dict) else None
    if not isinstance(content, dict):
        raise InvalidUpstreamStructure("candidates[0].content")

    part = _first(content, "parts", "candidates[0].content.parts")

    text = part.get("text") if isinstance(part, dict) else None
    if not isinstance(text, str):
        raise InvalidUpstreamStructure("candidates[0].content.parts[0].text")

    return text
