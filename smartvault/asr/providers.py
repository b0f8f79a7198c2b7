from __future__ import annotations

import logging
from typing import Any

import openai
from openai import OpenAI

from ..pipeline.models import AudioClip
from ..utils.file import scratch_file
from ..utils.retry import with_retry
from ..utils.text import clean_text, preview


logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (openai.APIConnectionError, openai.APITimeoutError, openai.RateLimitError)


class TranscriptionError(RuntimeError):
    def __init__(self, message: str, raw_response: Any = None):
        super().__init__(message)
        self.raw_response = raw_response


class OpenAITranscriber:
    """Speech-to-text over the OpenAI audio transcription endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        model: str = "whisper-1",
        language: str | None = "en",
        timeout: float = 60.0,
        retries: int = 2,
        tmp_root: str | None = None,
        client: OpenAI | None = None,
    ) -> None:
        self.client = client or OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self.model = model
        self.language = language
        self.retries = retries
        self.tmp_root = tmp_root

    def transcribe(self, clip: AudioClip) -> str:
        logger.info("[asr] transcribing %d bytes, format=%s, model=%s", len(clip.data), clip.format, self.model)
        # the endpoint infers the codec from the file name, so the suffix matters
        with scratch_file(clip.data, suffix=f".{clip.format}", prefix="whisper", root=self.tmp_root) as path:

            def _call() -> Any:
                with path.open("rb") as audio_file:
                    kwargs: dict[str, Any] = {"model": self.model, "file": audio_file}
                    if self.language:
                        kwargs["language"] = self.language
                    return self.client.audio.transcriptions.create(**kwargs)

            try:
                response = with_retry(_call, retries=self.retries, base_delay=1.0, retry_on=TRANSIENT_ERRORS)
            except openai.OpenAIError as exc:
                raise TranscriptionError(f"Failed to transcribe audio: {exc}") from exc

        text = clean_text(getattr(response, "text", "") or "")
        logger.info("[asr] transcription complete: %d chars", len(text))
        logger.debug("[asr] preview: %s", preview(text))
        return text
