"""Text helpers shared by the generation agents."""

import json
import re

_FENCE_RE = re.compile(r'```(?:json)?\s*\n(.*?)\n\s*```', re.DOTALL)


def parse_json_response(text: str) -> dict | list:
    """Extract JSON from a model response that may contain markdown fences.

    Truncated JSON is not repaired: a cut-off bible or outline is reported
    as an error rather than completed with guessed brackets.

    Raises:
        ValueError: if no JSON object or array can be decoded.
    """
    m = _FENCE_RE.search(text)
    if m:
        try:
            return json.loads(m.group(1))
        except json.JSONDecodeError:
            pass

    cleaned = text.strip()
    if cleaned.startswith('{') or cleaned.startswith('['):
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError:
            pass

    # Prose around the payload: fall back to the outermost bracket pair
    for open_ch, close_ch in [('[', ']'), ('{', '}')]:
        start = cleaned.find(open_ch)
        if start == -1:
            continue
        end = cleaned.rfind(close_ch)
        if end > start:
            try:
                return json.loads(cleaned[start:end + 1])
            except json.JSONDecodeError:
                pass

    raise ValueError(f"Could not parse JSON from response: {text[:200]}...")


def tail_window(text: str, max_chars: int) -> str:
    """Return at most the last ``max_chars`` characters of ``text``."""
    if max_chars <= 0:
        return ""
    return text[-max_chars:]


def preview(text: str | None, limit: int = 200) -> str:
    if not text:
        return ""
    return text[:limit]
