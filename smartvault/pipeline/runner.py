from __future__ import annotations

import logging
from typing import Callable
from urllib.parse import urlparse

from ..analysis.content import ContentAnalyzer
from ..analysis.normalize import DEFAULT_TITLE, normalize_video_analysis
from ..analysis.video import VideoAnalyzer
from ..asr.providers import OpenAITranscriber, TranscriptionError
from ..config import Settings
from ..llm.client import ChatClient
from ..media.base import MediaExtractionError
from ..media.ytdlp import YtDlpExtractor
from ..platforms.resolver import PlatformResolver, UnsupportedPlatformError
from ..sources.metadata import clean_metadata_title, fetch_metadata
from .models import Item, PageMetadata, VideoData
from .store import InMemoryItemStore, ItemStore
from .transcript import TranscriptAcquirer


logger = logging.getLogger(__name__)

MIN_AI_TITLE_LENGTH = 5


class InvalidInputError(ValueError):
    pass


class VideoIngestError(RuntimeError):
    """The video could not be turned into text (download or transcription failed)."""


def validate_url(url: str) -> str:
    if not url or not isinstance(url, str):
        raise InvalidInputError("URL is required")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidInputError(f"Invalid URL format: {url}")
    return url


class IngestPipeline:
    def __init__(
        self,
        platform_resolver: PlatformResolver,
        transcript_acquirer: TranscriptAcquirer,
        video_analyzer: VideoAnalyzer,
        content_analyzer: ContentAnalyzer,
        store: ItemStore,
        metadata_fetcher: Callable[[str], PageMetadata] = fetch_metadata,
    ) -> None:
        self.platform_resolver = platform_resolver
        self.transcript_acquirer = transcript_acquirer
        self.video_analyzer = video_analyzer
        self.content_analyzer = content_analyzer
        self.store = store
        self.metadata_fetcher = metadata_fetcher

    def save_video(self, user_id: str, url: str) -> Item:
        url = validate_url(url)
        platform = self.platform_resolver.classify(url)
        if not platform.supported:
            raise UnsupportedPlatformError(url)
        logger.info("[pipeline] processing %s video: %s", platform.type, url)

        try:
            transcript = self.transcript_acquirer.acquire(url)
        except (MediaExtractionError, TranscriptionError) as exc:
            logger.error("[pipeline] could not acquire video content: %s", exc)
            raise VideoIngestError(f"Could not acquire video content: {exc}") from exc
        if not transcript.text.strip():
            raise VideoIngestError("Could not acquire video content: empty transcript")

        raw = self.video_analyzer.extract(transcript, url)
        analysis = normalize_video_analysis(raw, transcript.text)

        title = analysis.title
        metadata = self.metadata_fetcher(url)
        if raw.from_fallback:
            logger.warning("[pipeline] AI analysis unavailable, saved with fallback summary")
        # The page title bypasses normalize_title: it keeps its own casing, can run to
        # MAX_METADATA_TITLE plus "...", and the summary was de-duplicated against the AI title.
        ai_title_weak = title == DEFAULT_TITLE or len(title) < MIN_AI_TITLE_LENGTH
        if ai_title_weak and metadata.title and metadata.title != urlparse(url).hostname:
            title = clean_metadata_title(metadata.title)

        item = Item(
            user_id=user_id,
            type="video",
            title=title,
            summary=analysis.summary,
            category=analysis.category,
            url=url,
            image_url=metadata.image_url,
            video_data=VideoData(
                platform=platform.type,
                transcript=transcript.text,
                structured_content=analysis.structured_content,
            ),
        )
        self.store.create_item(item)
        logger.info("[pipeline] saved video item %s (%s)", item.id, analysis.structured_content.type)
        return item

    def save_link(self, user_id: str, url: str) -> Item:
        url = validate_url(url)
        metadata = self.metadata_fetcher(url)
        analysis = self.content_analyzer.analyze(metadata.title, metadata.description, url=url)
        item = Item(
            user_id=user_id,
            type="link",
            title=metadata.title,
            summary=analysis.summary,
            category=analysis.category,
            url=url,
            image_url=metadata.image_url,
        )
        self.store.create_item(item)
        logger.info("[pipeline] saved link item %s", item.id)
        return item

    def save_note(self, user_id: str, title: str, content: str) -> Item:
        if not title or not title.strip():
            raise InvalidInputError("Title is required")
        if not content or not content.strip():
            raise InvalidInputError("Content is required")
        analysis = self.content_analyzer.analyze(title, content)
        item = Item(
            user_id=user_id,
            type="note",
            title=title,
            summary=analysis.summary,
            category=analysis.category,
            content=content,
        )
        self.store.create_item(item)
        logger.info("[pipeline] saved note item %s", item.id)
        return item

    def categories(self, user_id: str) -> list[str]:
        return self.store.categories_for_user(user_id)


class PipelineFactory:
    def __init__(self, settings: Settings, store: ItemStore | None = None) -> None:
        self.settings = settings
        self.store = store or InMemoryItemStore()

    def create(self) -> IngestPipeline:
        settings = self.settings
        resolver = PlatformResolver()
        chat = ChatClient(settings.api_key, settings.base_url, timeout=settings.llm_timeout)
        extractor = YtDlpExtractor(
            binary=settings.ytdlp_path,
            caption_timeout=settings.caption_timeout,
            audio_timeout=settings.audio_timeout,
            tmp_root=settings.tmp_dir,
        )
        transcriber = OpenAITranscriber(
            api_key=settings.api_key,
            base_url=settings.base_url,
            model=settings.transcribe_model,
            language=settings.transcribe_language or None,
            timeout=settings.llm_timeout,
            tmp_root=settings.tmp_dir,
        )
        return IngestPipeline(
            platform_resolver=resolver,
            transcript_acquirer=TranscriptAcquirer(resolver, extractor, transcriber),
            video_analyzer=VideoAnalyzer(chat, settings.chat_models),
            content_analyzer=ContentAnalyzer(chat, settings.chat_models),
            store=self.store,
        )
