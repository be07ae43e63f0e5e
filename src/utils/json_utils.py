"""
JSON Utilities - Robust parsing and repair functions for LLM outputs.
"""
import json
import re
from typing import Any, Dict, Optional

from .logger import setup_logger

logger = setup_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


def _strip_code_fences(text: str) -> str:
    fenced = _FENCE_RE.search(text)
    if fenced:
        return fenced.group(1)
    return text


def _balance_braces(json_str: str) -> str:
    """Close unterminated strings and braces/brackets left open by a truncated response."""
    repaired = json_str.strip()

    stack = []
    in_string = False
    escaped = False

    for char in repaired:
        if escaped:
            escaped = False
            continue
        if char == '\\':
            escaped = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if not in_string:
            if char in '{[':
                stack.append(char)
            elif char == '}' and stack and stack[-1] == '{':
                stack.pop()
            elif char == ']' and stack and stack[-1] == '[':
                stack.pop()

    if in_string:
        repaired += '"'

    while stack:
        opener = stack.pop()
        repaired += '}' if opener == '{' else ']'

    return repaired


def extract_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Decode the first JSON object embedded in `text`.

    Tolerates markdown code fences, leading prose and trailing prose after the
    object. Truncated objects get one brace-balancing repair attempt.

    Args:
        text: Raw model output

    Returns:
        The decoded object, or None when no JSON object can be recovered
    """
    if not text:
        return None

    clean_text = _strip_code_fences(text.strip())
    start_index = clean_text.find('{')
    if start_index == -1:
        return None

    candidate = clean_text[start_index:]
    decoder = json.JSONDecoder()

    try:
        value, _ = decoder.raw_decode(candidate)
    except json.JSONDecodeError:
        repaired = _balance_braces(candidate)
        try:
            value, _ = decoder.raw_decode(repaired)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to repair JSON: {e}. Repaired attempt: {repaired[:100]}...")
            return None

    if not isinstance(value, dict):
        return None
    return value
