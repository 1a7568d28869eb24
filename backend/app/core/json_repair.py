"""Payload extraction and light repair for LLM responses.

Single source of truth for pulling a structured payload out of free-form model
output that may wrap it in markdown fences or surround it with prose.
"""
from __future__ import annotations

import re

_FENCED_BLOCK = re.compile(r"```(?:json|yaml|yml)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


def extract_fenced_block(text: str) -> str | None:
    """Inner text of the first fenced code block (optionally tagged json/yaml)."""
    match = _FENCED_BLOCK.search(text or "")
    if match is None:
        return None
    return match.group(1).strip()


def extract_json_object(text: str) -> str | None:
    """Return the first balanced ``{...}`` span in ``text``, or None.

    Braces inside JSON string literals are ignored when matching.
    """
    if not text:
        return None
    start = text.find("{")
    if start == -1:
        return None
    depth = 0
    in_string = False
    escape_next = False
    for i in range(start, len(text)):
        c = text[i]
        if escape_next:
            escape_next = False
            continue
        if c == "\\":
            escape_next = True
            continue
        if c == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    # Unmatched braces
    return None


def extract_payload(text: str) -> str:
    """Extract the payload text from a model response.

    Order: fenced code block, else the first balanced ``{...}`` span, else the
    raw text (stripped). Never fails; parsing is the caller's job.
    """
    fenced = extract_fenced_block(text)
    if fenced is not None:
        return fenced
    obj = extract_json_object(text)
    if obj is not None:
        return obj.strip()
    return (text or "").strip()


def strip_trailing_commas(text: str) -> str:
    """Drop trailing commas before ``]`` or ``}`` (a common model slip)."""
    return _TRAILING_COMMA.sub(r"\1", text)
