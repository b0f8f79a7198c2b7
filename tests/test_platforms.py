"""Tests for video platform classification."""

import pytest

from smartvault.platforms.resolver import PlatformResolver, UnsupportedPlatformError


class TestClassify:
    def setup_method(self):
        self.resolver = PlatformResolver()

    def test_tiktok(self):
        result = self.resolver.classify("https://www.tiktok.com/@chef/video/7300000000000000000")
        assert result.type == "tiktok"
        assert result.supported is True

    def test_tiktok_short_link(self):
        assert self.resolver.classify("https://vm.tiktok.com/ZMabc123/").type == "tiktok"

    def test_instagram_reel(self):
        assert self.resolver.classify("https://www.instagram.com/reel/Cxyz123/").type == "instagram"
        assert self.resolver.classify("https://instagram.com/reels/Cxyz123/").supported

    def test_instagram_post_not_supported(self):
        result = self.resolver.classify("https://www.instagram.com/p/Cxyz123/")
        assert result.supported is False

    def test_youtube_shorts_and_watch(self):
        assert self.resolver.classify("https://youtube.com/shorts/abc123").type == "youtube"
        assert self.resolver.classify("https://www.youtube.com/watch?v=dQw4w9WgXcQ").supported
        assert self.resolver.classify("https://youtu.be/dQw4w9WgXcQ").supported

    def test_case_insensitive(self):
        assert self.resolver.classify("HTTPS://WWW.TIKTOK.COM/@A/VIDEO/1").supported
        assert self.resolver.classify("https://www.Instagram.com/Reel/abc/").type == "instagram"

    @pytest.mark.parametrize(
        "url",
        [
            "https://vimeo.com/123",
            "https://example.com/video",
            "not a url",
            "",
        ],
    )
    def test_unsupported(self, url):
        result = self.resolver.classify(url)
        assert result.supported is False
        assert result.type == "youtube"


class TestRequire:
    def test_raises_for_unsupported(self):
        with pytest.raises(UnsupportedPlatformError, match="vimeo"):
            PlatformResolver().require("https://vimeo.com/123")

    def test_returns_platform(self):
        assert PlatformResolver().require("https://youtu.be/x").type == "youtube"
