import json
import logging
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?|\n?```", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

M = TypeVar("M", bound=BaseModel)


def parse_json_object(content: str | None) -> dict[str, Any] | None:
    """Best-effort parse of an oracle reply into a JSON object.

    Markdown code fences are stripped first. If the remainder is not valid JSON the
    outermost ``{...}`` block is tried. Anything else yields None.
    """
    if not content:
        return None
    cleaned = _FENCE_RE.sub("", content).strip()
    if not cleaned:
        return None

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        m = _OBJECT_RE.search(cleaned)
        if not m:
            return None
        try:
            parsed = json.loads(m.group(0))
        except json.JSONDecodeError:
            return None

    if not isinstance(parsed, dict):
        return None
    return parsed


def validate_items(raw: Any, model: type[M]) -> list[M]:
    """Validate a list of oracle items one by one, dropping the ones that don't fit."""
    if not isinstance(raw, list):
        return []
    items: list[M] = []
    for i, entry in enumerate(raw):
        try:
            items.append(model.model_validate(entry))
        except ValidationError as e:
            logger.debug("dropping %s item %d: %s", model.__name__, i, e.errors())
    return items
