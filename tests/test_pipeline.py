import pytest

from smartvault.analysis.content import ContentAnalyzer
from smartvault.analysis.video import VideoAnalyzer
from smartvault.asr.providers import OpenAITranscriber, TranscriptionError
from smartvault.config import Settings
from smartvault.media.base import MediaExtractionError
from smartvault.media.ytdlp import YtDlpExtractor
from smartvault.pipeline.models import PageMetadata, TranscriptResult, TranscriptSource
from smartvault.pipeline.runner import (
    IngestPipeline,
    InvalidInputError,
    PipelineFactory,
    VideoIngestError,
    validate_url,
)
from smartvault.pipeline.store import InMemoryItemStore
from smartvault.platforms.resolver import PlatformResolver, UnsupportedPlatformError


MODELS = ("gpt-4o-mini",)
VIDEO_URL = "https://www.tiktok.com/@chef/video/42"
TRANSCRIPT = "Whisk two eggs with a splash of milk. Cook on low heat and stir gently until just set."


class FakeAcquirer:
    def __init__(self, result=None, error=None):
        self.result = result or TranscriptResult(TRANSCRIPT, TranscriptSource.CAPTIONS)
        self.error = error
        self.urls = []

    def acquire(self, url):
        self.urls.append(url)
        if self.error:
            raise self.error
        return self.result


class TestPipeline:
    def setup_method(self):
        self.store = InMemoryItemStore()
        self.metadata = PageMetadata(
            title='Chef on TikTok: "Lazy Sunday scrambled eggs #brunch"',
            description="Soft scrambled eggs",
            image_url="https://cdn.example.com/cover.jpg",
        )

    def _pipeline(self, make_chat, video_reply=None, content_reply=None, acquirer=None):
        self.acquirer = acquirer or FakeAcquirer()
        self.video_chat = make_chat(*([video_reply] if video_reply is not None else []))
        self.content_chat = make_chat(*([content_reply] if content_reply is not None else []))
        return IngestPipeline(
            platform_resolver=PlatformResolver(),
            transcript_acquirer=self.acquirer,
            video_analyzer=VideoAnalyzer(self.video_chat, MODELS),
            content_analyzer=ContentAnalyzer(self.content_chat, MODELS),
            store=self.store,
            metadata_fetcher=lambda url: self.metadata,
        )

    def test_save_video(self, make_chat):
        reply = {
            "title": "soft scrambled eggs",
            "type": "recipe",
            "category": "cooking",
            "summary": "Low and slow eggs with milk for a creamy texture.",
            "recipe": {"name": "Soft Scrambled Eggs", "ingredients": ["2 eggs", "a splash of milk"]},
        }
        pipeline = self._pipeline(make_chat, video_reply=reply)

        item = pipeline.save_video("u1", f"  {VIDEO_URL} ")

        assert item.type == "video"
        assert item.title == "Soft Scrambled Eggs"
        assert item.category == "Cooking"
        assert item.url == VIDEO_URL
        assert item.image_url == "https://cdn.example.com/cover.jpg"
        assert item.video_data.platform == "tiktok"
        assert item.video_data.transcript == TRANSCRIPT
        assert item.video_data.structured_content.recipe.ingredients == ["2 eggs", "a splash of milk"]
        assert self.store.items_for_user("u1") == [item]
        assert item.to_dict()["videoData"]["structuredContent"]["type"] == "recipe"

    def test_weak_title_replaced_by_page_title(self, make_chat):
        reply = {"title": "\U0001F373", "type": "general", "category": "Cooking", "summary": "Eggs done right."}
        item = self._pipeline(make_chat, video_reply=reply).save_video("u1", VIDEO_URL)
        assert item.title == "Lazy Sunday scrambled eggs"

    def test_weak_title_kept_when_page_title_is_hostname(self, make_chat):
        self.metadata = PageMetadata(title="www.tiktok.com")
        reply = {"title": "hi", "type": "general", "category": "Cooking", "summary": "Eggs done right."}
        item = self._pipeline(make_chat, video_reply=reply).save_video("u1", VIDEO_URL)
        assert item.title == "Hi"

    def test_unsupported_platform(self, make_chat):
        pipeline = self._pipeline(make_chat)
        with pytest.raises(UnsupportedPlatformError):
            pipeline.save_video("u1", "https://vimeo.com/123")
        assert self.acquirer.urls == []

    @pytest.mark.parametrize("url", ["", "not a url", "ftp://www.youtube.com/watch?v=1"])
    def test_invalid_url(self, make_chat, url):
        with pytest.raises(InvalidInputError):
            self._pipeline(make_chat).save_video("u1", url)

    @pytest.mark.parametrize(
        "error",
        [MediaExtractionError("Failed to extract audio: 403"), TranscriptionError("Failed to transcribe audio: x")],
    )
    def test_acquisition_failure_is_wrapped(self, make_chat, error):
        pipeline = self._pipeline(make_chat, acquirer=FakeAcquirer(error=error))
        with pytest.raises(VideoIngestError, match="Could not acquire video content") as info:
            pipeline.save_video("u1", VIDEO_URL)
        assert info.value.__cause__ is error
        assert self.store.items_for_user("u1") == []
        assert self.video_chat.calls == []

    def test_analysis_failure_still_saves(self, make_chat):
        pipeline = self._pipeline(make_chat, video_reply="garbage")
        item = pipeline.save_video("u1", VIDEO_URL)
        assert item.category == "General"
        assert item.video_data.structured_content.type == "general"
        assert item.summary != item.title

    def test_save_link(self, make_chat):
        pipeline = self._pipeline(make_chat, content_reply={"category": "cooking", "summary": "Eggs for brunch."})

        item = pipeline.save_link("u1", "https://blog.example.com/eggs")

        assert item.type == "link"
        assert item.title == self.metadata.title
        assert item.category == "Cooking"
        assert item.image_url == self.metadata.image_url
        assert "Soft scrambled eggs" in self.content_chat.calls[0]["user"]

    def test_save_note(self, make_chat):
        pipeline = self._pipeline(make_chat, content_reply={"category": "productivity", "summary": "Plan the week."})
        item = pipeline.save_note("u1", "Sunday plan", "Write the weekly goals and block focus time.")
        assert item.type == "note"
        assert item.content == "Write the weekly goals and block focus time."
        assert item.category == "Productivity"
        assert item.url is None

    @pytest.mark.parametrize("title, content", [("", "body"), ("title", "   ")])
    def test_save_note_requires_title_and_content(self, make_chat, title, content):
        with pytest.raises(InvalidInputError):
            self._pipeline(make_chat).save_note("u1", title, content)

    def test_categories(self, make_chat):
        pipeline = self._pipeline(make_chat, content_reply={"category": "fitness", "summary": "Stretch daily."})
        pipeline.save_note("u1", "Stretching", "Ten minutes every morning.")
        assert pipeline.categories("u1") == ["Fitness"]
        assert pipeline.categories("u2") == []


def test_validate_url_strips_whitespace():
    assert validate_url(" https://youtu.be/x ") == "https://youtu.be/x"


def test_factory_wires_components(tmp_path):
    settings = Settings(api_key="sk-test", ytdlp_path="/opt/yt-dlp", tmp_dir=str(tmp_path))
    store = InMemoryItemStore()

    pipeline = PipelineFactory(settings, store=store).create()

    acquirer = pipeline.transcript_acquirer
    assert pipeline.store is store
    assert isinstance(acquirer.extractor, YtDlpExtractor)
    assert acquirer.extractor.binary == "/opt/yt-dlp"
    assert acquirer.extractor.tmp_root == str(tmp_path)
    assert isinstance(acquirer.transcriber, OpenAITranscriber)
    assert pipeline.video_analyzer.models == list(settings.chat_models)
