from __future__ import annotations

import logging
from typing import Protocol

from .models import AudioClip, TranscriptResult, TranscriptSource
from ..asr.providers import TranscriptionError
from ..media.base import MediaExtractor
from ..media.ytdlp import MIN_CAPTION_LENGTH
from ..platforms.resolver import PlatformResolver


logger = logging.getLogger(__name__)


class Transcriber(Protocol):
    def transcribe(self, clip: AudioClip) -> str: ...


class TranscriptAcquirer:
    """Captions first, audio transcription second.

    Captions are never attempted concurrently with audio; the audio path only
    runs when captions are missing or too short.
    """

    def __init__(
        self,
        resolver: PlatformResolver,
        extractor: MediaExtractor,
        transcriber: Transcriber,
    ) -> None:
        self.resolver = resolver
        self.extractor = extractor
        self.transcriber = transcriber

    def acquire(self, url: str) -> TranscriptResult:
        platform = self.resolver.require(url)
        logger.info("[transcript] %s video: %s", platform.type, url)

        captions = self.extractor.extract_captions(url)
        if captions and len(captions) > MIN_CAPTION_LENGTH:
            logger.info("[transcript] using captions (%d chars)", len(captions))
            return TranscriptResult(text=captions, source=TranscriptSource.CAPTIONS)

        logger.info("[transcript] no usable captions, falling back to audio transcription")
        clip = self.extractor.extract_audio(url)
        text = self.transcriber.transcribe(clip)
        if not text or not text.strip():
            raise TranscriptionError("Transcription returned no text")
        return TranscriptResult(text=text.strip(), source=TranscriptSource.AUDIO)
