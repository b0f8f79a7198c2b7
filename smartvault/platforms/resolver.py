from __future__ import annotations

from typing import Iterable

from .base import BasePlatform
from .sites import InstagramPlatform, TikTokPlatform, YouTubePlatform
from ..pipeline.models import VideoPlatform


DEFAULT_PLATFORM_TYPE = "youtube"


class UnsupportedPlatformError(ValueError):
    def __init__(self, url: str):
        super().__init__(f"Unsupported video platform: {url}")
        self.url = url


class PlatformResolver:
    def __init__(self, platforms: Iterable[BasePlatform] | None = None) -> None:
        self.platforms = list(platforms) if platforms else [
            TikTokPlatform(),
            InstagramPlatform(),
            YouTubePlatform(),
        ]

    def classify(self, url: str) -> VideoPlatform:
        value = (url or "").strip().lower()
        for platform in self.platforms:
            if platform.matches(value):
                return VideoPlatform(type=platform.name, supported=True)
        return VideoPlatform(type=DEFAULT_PLATFORM_TYPE, supported=False)

    def require(self, url: str) -> VideoPlatform:
        platform = self.classify(url)
        if not platform.supported:
            raise UnsupportedPlatformError(url)
        return platform
