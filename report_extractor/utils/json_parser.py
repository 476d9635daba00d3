"""Lenient JSON decoding for model replies."""

import json
from typing import Any, Dict, List, Optional, Union

from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)

JsonValue = Union[Dict[str, Any], List[Any]]

_FENCE_OPENERS = ("```json", "```")
_FENCE = "```"


def parse_json_safely(text: Optional[str]) -> Optional[JsonValue]:
    """Decode the JSON object or array in a model reply.

    Accepts replies wrapped in a markdown code fence and replies with prose
    before or after the payload; in that case the first complete value that
    starts at a brace or bracket is returned.

    Args:
        text: Raw model reply

    Returns:
        Decoded value, or None when no JSON value can be recovered
    """
    if not text:
        return None

    payload = _strip_code_fence(text)
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        LOGGER.warning(f"Model reply is not bare JSON ({e}); scanning for an embedded value")

    decoder = json.JSONDecoder()
    for start in sorted(i for i in (payload.find("{"), payload.find("[")) if i != -1):
        try:
            value, _ = decoder.raw_decode(payload, start)
        except json.JSONDecodeError:
            continue
        LOGGER.info(f"Recovered embedded JSON value at offset {start}")
        return value

    LOGGER.error("Model reply contains no decodable JSON", extra={"response": payload[:500]})
    return None


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    for opener in _FENCE_OPENERS:
        if stripped.startswith(opener):
            stripped = stripped[len(opener):]
            break
    if stripped.endswith(_FENCE):
        stripped = stripped[: -len(_FENCE)]
    return stripped.strip()
