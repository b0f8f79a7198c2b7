from __future__ import annotations

import json
import logging
import re
from typing import Optional, Protocol, Sequence

from ..llm.client import classify_error, should_try_next_model
from ..utils.text import preview


logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)```", re.DOTALL)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class ChatBackend(Protocol):
    def complete(
        self,
        model: str,
        system: str,
        user: str,
        temperature: float,
        max_tokens: int,
        json_mode: bool = True,
    ) -> str: ...


class ResponseParseError(ValueError):
    pass


def parse_json_payload(text: str) -> dict:
    """Parse a model reply as a JSON object, salvaging fenced or wrapped output."""
    candidates = [text.strip()]
    fence = _FENCE_RE.search(text)
    if fence:
        candidates.append(fence.group(1).strip())
    span = _OBJECT_RE.search(text)
    if span:
        candidates.append(span.group(0))
    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    raise ResponseParseError(f"Invalid JSON response: {preview(text, 80)!r}")


def request_json(
    chat: ChatBackend,
    models: Sequence[str],
    system: str,
    user: str,
    temperature: float,
    max_tokens: int,
    label: str = "llm",
) -> Optional[dict]:
    """Try each model in order and return the first parsed payload.

    Only an unavailable model moves on to the next one. Any other failure,
    including an unparseable reply, ends the loop and returns None so the
    caller can fall back to its heuristic result.
    """
    for model in models:
        logger.info("[%s] trying model %s", label, model)
        try:
            raw = chat.complete(
                model=model,
                system=system,
                user=user,
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=True,
            )
            payload = parse_json_payload(raw)
        except ResponseParseError as exc:
            logger.error("[%s] model %s returned unusable output: %s", label, model, exc)
            return None
        except Exception as exc:
            error = classify_error(exc)
            logger.error(
                "[%s] model %s failed: kind=%s status=%s code=%s message=%s",
                label,
                model,
                error.kind.value,
                error.status,
                error.code,
                error,
            )
            if should_try_next_model(error.kind):
                logger.warning("[%s] model %s not available, trying next model", label, model)
                continue
            return None
        logger.info("[%s] model %s responded", label, model)
        return payload
    logger.error("[%s] all models failed", label)
    return None

