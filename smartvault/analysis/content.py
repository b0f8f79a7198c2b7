from __future__ import annotations

import logging
from typing import Optional, Sequence

from .base import ChatBackend, request_json
from .normalize import DEFAULT_CATEGORY, NO_SUMMARY, normalize_category, normalize_summary, truncate_summary
from .prompts import CONTENT_SYSTEM_PROMPT, build_content_user_prompt
from ..utils.text import clean_text
from ..pipeline.models import ContentAnalysis


logger = logging.getLogger(__name__)

TEMPERATURE = 0.7
MAX_TOKENS = 300


def fallback_content_analysis(title: str, content: Optional[str]) -> ContentAnalysis:
    source = clean_text(content or title or "")
    summary = source[:160].strip() or NO_SUMMARY
    return ContentAnalysis(category=DEFAULT_CATEGORY, summary=truncate_summary(summary))


class ContentAnalyzer:
    """Category and summary for links and notes."""

    def __init__(self, chat: ChatBackend, models: Sequence[str]) -> None:
        self.chat = chat
        self.models = list(models)

    def analyze(self, title: str, content: Optional[str], url: Optional[str] = None) -> ContentAnalysis:
        logger.info(
            "[content] analyzing title=%r content_len=%d url=%s",
            title[:50],
            len(content or ""),
            url or "n/a",
        )
        payload = request_json(
            self.chat,
            self.models,
            system=CONTENT_SYSTEM_PROMPT,
            user=build_content_user_prompt(title, content, url),
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
            label="content",
        )
        if payload is None:
            logger.error("[content] all models failed, using fallback analysis")
            return fallback_content_analysis(title, content)

        category = normalize_category(payload.get("category"))
        summary = normalize_summary(payload.get("summary"), title, content)
        logger.info("[content] category=%s", category)
        return ContentAnalysis(category=category, summary=summary)
