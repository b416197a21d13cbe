import logging
from typing import Any, Dict, Optional

import tiktoken

from mcq_generator.clients import field
from mcq_generator.models import TokenUsageReport


logger = logging.getLogger(__name__)

ESTIMATED_NOTE = "Token count estimated using tiktoken (provider usage not returned)."


def _usage_dict(usage: Any) -> Optional[Dict[str, Any]]:
    if usage is None:
        return None
    if isinstance(usage, dict):
        return usage
    if hasattr(usage, "model_dump"):
        return usage.model_dump()
    return dict(vars(usage))


def _first(usage: Dict[str, Any], *names: str) -> Optional[int]:
    for name in names:
        value = usage.get(name)
        if value is not None:
            return value
    return None


def count_tokens(model: str, text: str) -> Optional[int]:
    """Count tokens with the model's tiktoken encoding, None if it has none."""
    try:
        encoding = tiktoken.encoding_for_model(model)
    except KeyError:
        return None
    return len(encoding.encode(text))


def report_from_usage(usage: Dict[str, Any]) -> TokenUsageReport:
    prompt_tokens = _first(usage, "prompt_tokens", "input_tokens")
    completion_tokens = _first(usage, "completion_tokens", "output_tokens")
    total_tokens = usage.get("total_tokens")
    if total_tokens is None:
        total_tokens = (prompt_tokens or 0) + (completion_tokens or 0)
    return TokenUsageReport(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=total_tokens,
        raw_usage=usage,
    )


def estimate_report(model: str, prompt_text: str, completion_text: str) -> TokenUsageReport:
    prompt_tokens = count_tokens(model, prompt_text)
    completion_tokens = count_tokens(model, completion_text)
    if prompt_tokens is None and completion_tokens is None:
        return TokenUsageReport(note=f"Token usage unavailable: no tiktoken encoding for model {model!r}.")
    return TokenUsageReport(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=(prompt_tokens or 0) + (completion_tokens or 0),
        note=ESTIMATED_NOTE,
    )


def build_token_report(response: Any, prompt_text: str, completion_text: str, model: str) -> TokenUsageReport:
    """Best-effort usage report; never raises."""
    try:
        usage = field(response, "usage") or field(field(response, "meta"), "usage")
        usage = _usage_dict(usage)
        if usage:
            return report_from_usage(usage)
        return estimate_report(model, prompt_text, completion_text)
    except Exception as e:
        logger.warning("Token usage report failed: %s", e)
        return TokenUsageReport(note=f"Token usage unavailable: {e}")
