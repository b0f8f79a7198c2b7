from __future__ import annotations

from abc import ABC, abstractmethod


class BasePlatform(ABC):
    name: str = "base"

    @abstractmethod
    def matches(self, url: str) -> bool:
        """Return True if the lowercased URL belongs to this platform."""
        raise NotImplementedError
