from __future__ import annotations

import logging
from typing import Sequence, Union

from .base import ChatBackend, request_json
from .normalize import DEFAULT_CATEGORY, DEFAULT_TITLE, MAX_SUMMARY_LENGTH, MAX_TITLE_LENGTH
from .prompts import VIDEO_SYSTEM_PROMPT, build_video_user_prompt
from .repair import as_text, repair_structured_content
from ..pipeline.models import RawVideoAnalysis, StructuredContent, TranscriptResult, TranscriptSource
from ..utils.text import first_sentence


logger = logging.getLogger(__name__)

TEMPERATURE = 0.3
MAX_TOKENS = 3000


def fallback_analysis(transcript: str) -> RawVideoAnalysis:
    title = first_sentence(transcript[:50]) or DEFAULT_TITLE
    return RawVideoAnalysis(
        title=title[:MAX_TITLE_LENGTH],
        category=DEFAULT_CATEGORY,
        summary=transcript[:MAX_SUMMARY_LENGTH],
        structured_content=StructuredContent(type="general"),
        from_fallback=True,
    )


class VideoAnalyzer:
    def __init__(self, chat: ChatBackend, models: Sequence[str]) -> None:
        self.chat = chat
        self.models = list(models)

    def extract(self, transcript: Union[TranscriptResult, str], url: str) -> RawVideoAnalysis:
        if isinstance(transcript, str):
            transcript = TranscriptResult(text=transcript, source=TranscriptSource.AUDIO)
        text = transcript.text
        logger.info("[video] structuring transcript: %d chars, source=%s", len(text), transcript.source.value)

        payload = request_json(
            self.chat,
            self.models,
            system=VIDEO_SYSTEM_PROMPT,
            user=build_video_user_prompt(text, transcript.prompt_label, url),
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
            label="video",
        )
        if payload is None:
            logger.error("[video] all models failed, using fallback")
            return fallback_analysis(text)

        structured = repair_structured_content(payload)
        result = RawVideoAnalysis(
            title=as_text(payload.get("title")) or "",
            category=as_text(payload.get("category")) or DEFAULT_CATEGORY,
            summary=as_text(payload.get("summary")) or text[:MAX_SUMMARY_LENGTH],
            structured_content=structured,
        )
        logger.info("[video] type=%s category=%s", structured.type, result.category)
        return result
