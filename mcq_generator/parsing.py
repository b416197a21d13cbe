"""Recover MCQ records from free-form model text.

Models are asked for a bare JSON array but frequently wrap it in a markdown
code fence or add a sentence around it. ``extract_json_array`` undoes the
common cases with a greedy bracket span, which is a heuristic rather than a
parser: two arrays in one reply, or prose containing ``]`` after the array,
make the span unparseable and the reply is rejected.
"""

import json
import re
from typing import Any, List, Optional

from pydantic import BaseModel

from mcq_generator.models import MCQRecord


_LEADING_FENCE = re.compile(r"^```(\w+)?\n")
_TRAILING_FENCE = re.compile(r"```$")
_ARRAY_SPAN = re.compile(r"\[.*\]", re.DOTALL)


def clean_model_output(text: Optional[str]) -> str:
    """Strip a surrounding markdown code fence, if any."""
    if not text:
        return ""
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def extract_json_array(text: Optional[str]) -> Optional[List[Any]]:
    """Return the first-``[``-to-last-``]`` span parsed as JSON, or None."""
    if not text:
        return None
    cleaned = clean_model_output(text)
    match = _ARRAY_SPAN.search(cleaned)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, list) else None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_record(item: Any) -> MCQRecord:
    if isinstance(item, BaseModel):
        item = item.model_dump()
    if not isinstance(item, dict):
        item = {}
    options = item.get("options")
    return MCQRecord(
        question=_as_text(item.get("question")),
        options=[_as_text(option) for option in options] if isinstance(options, list) else [],
        answer=_as_text(item.get("answer")),
        explanation=_as_text(item.get("explanation")),
    )


def normalize_records(items: List[Any]) -> List[MCQRecord]:
    # Shape only: option count and answer letter are not checked.
    return [normalize_record(item) for item in items]
