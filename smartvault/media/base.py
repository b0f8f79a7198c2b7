from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..pipeline.models import AudioClip


class MediaExtractionError(RuntimeError):
    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class MediaExtractor(ABC):
    @abstractmethod
    def extract_captions(self, url: str) -> Optional[str]:
        """Return caption text, or None when no usable captions exist."""
        raise NotImplementedError

    @abstractmethod
    def extract_audio(self, url: str) -> AudioClip:
        """Return the best available audio track, raising MediaExtractionError on failure."""
        raise NotImplementedError
