from __future__ import annotations

from .base import BasePlatform


class TikTokPlatform(BasePlatform):
    name = "tiktok"

    def matches(self, url: str) -> bool:
        return "tiktok.com" in url


class InstagramPlatform(BasePlatform):
    name = "instagram"

    def matches(self, url: str) -> bool:
        # Only reels carry a video; posts and profiles are not supported.
        return "instagram.com" in url and ("/reel/" in url or "/reels/" in url)


class YouTubePlatform(BasePlatform):
    name = "youtube"

    def matches(self, url: str) -> bool:
        # Shorts (/shorts/) and regular watch pages are both accepted.
        return "youtube.com" in url or "youtu.be" in url
