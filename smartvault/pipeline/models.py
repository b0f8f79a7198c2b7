from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
import uuid


CONTENT_TYPES = ("recipe", "workout", "tutorial", "general")


@dataclass(frozen=True)
class VideoPlatform:
    type: str
    supported: bool


class TranscriptSource(str, Enum):
    CAPTIONS = "captions"
    AUDIO = "audio"


@dataclass(frozen=True)
class TranscriptResult:
    text: str
    source: TranscriptSource

    @property
    def is_raw_subtitle(self) -> bool:
        return "WEBVTT" in self.text or "-->" in self.text

    @property
    def prompt_label(self) -> str:
        """Provenance wording used in the extraction prompt.

        Text that still carries subtitle container markers was not cleaned,
        so it is presented as a transcription regardless of its source.
        """
        if self.source is TranscriptSource.CAPTIONS and self.text and not self.is_raw_subtitle:
            return "captions/subtitles (high quality)"
        return "audio transcription"


@dataclass(frozen=True)
class AudioClip:
    data: bytes
    format: str


@dataclass(frozen=True)
class Recipe:
    name: str
    ingredients: list[str]
    instructions: list[str]
    servings: Optional[int] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "name": self.name,
            "ingredients": list(self.ingredients),
            "instructions": list(self.instructions),
        }
        if self.servings is not None:
            data["servings"] = self.servings
        if self.prep_time is not None:
            data["prepTime"] = self.prep_time
        if self.cook_time is not None:
            data["cookTime"] = self.cook_time
        return data


@dataclass(frozen=True)
class Exercise:
    name: str
    sets: Optional[int] = None
    reps: Optional[str] = None
    duration: Optional[str] = None
    rest: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"name": self.name}
        for key in ("sets", "reps", "duration", "rest"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class Workout:
    name: str
    exercises: list[Exercise]
    duration: Optional[str] = None
    difficulty: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "name": self.name,
            "exercises": [e.to_dict() for e in self.exercises],
        }
        if self.duration is not None:
            data["duration"] = self.duration
        if self.difficulty is not None:
            data["difficulty"] = self.difficulty
        return data


@dataclass(frozen=True)
class TutorialStep:
    step: int
    description: str
    tips: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"step": self.step, "description": self.description}
        if self.tips is not None:
            data["tips"] = self.tips
        return data


@dataclass(frozen=True)
class Tutorial:
    title: str
    steps: list[TutorialStep]
    tools: Optional[list[str]] = None
    difficulty: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "title": self.title,
            "steps": [s.to_dict() for s in self.steps],
        }
        if self.tools is not None:
            data["tools"] = list(self.tools)
        if self.difficulty is not None:
            data["difficulty"] = self.difficulty
        return data


@dataclass(frozen=True)
class StructuredContent:
    """Tagged union over the detail blocks.

    At most one block is set, and only the one named by ``type``.
    """

    type: str = "general"
    recipe: Optional[Recipe] = None
    workout: Optional[Workout] = None
    tutorial: Optional[Tutorial] = None

    def __post_init__(self) -> None:
        if self.type not in CONTENT_TYPES:
            raise ValueError(f"Unknown content type: {self.type}")
        blocks = {"recipe": self.recipe, "workout": self.workout, "tutorial": self.tutorial}
        for name, block in blocks.items():
            if block is not None and name != self.type:
                raise ValueError(f"{name} block present for content type {self.type}")

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"type": self.type}
        if self.recipe is not None:
            data["recipe"] = self.recipe.to_dict()
        if self.workout is not None:
            data["workout"] = self.workout.to_dict()
        if self.tutorial is not None:
            data["tutorial"] = self.tutorial.to_dict()
        return data


@dataclass(frozen=True)
class RawVideoAnalysis:
    """Model output after JSON repair, before title/category/summary cleanup."""

    title: str
    category: str
    summary: str
    structured_content: StructuredContent
    from_fallback: bool = False


@dataclass(frozen=True)
class VideoAnalysis:
    title: str
    category: str
    summary: str
    structured_content: StructuredContent

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "category": self.category,
            "summary": self.summary,
            "structuredContent": self.structured_content.to_dict(),
        }


@dataclass(frozen=True)
class ContentAnalysis:
    category: str
    summary: str


@dataclass(frozen=True)
class PageMetadata:
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None


@dataclass
class VideoData:
    platform: str
    transcript: Optional[str] = None
    structured_content: Optional[StructuredContent] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"platform": self.platform}
        if self.transcript is not None:
            data["transcript"] = self.transcript
        if self.structured_content is not None:
            data["structuredContent"] = self.structured_content.to_dict()
        return data


@dataclass
class Item:
    user_id: str
    type: str
    title: str
    summary: str
    category: str
    tags: list[str] = field(default_factory=list)
    url: Optional[str] = None
    image_url: Optional[str] = None
    content: Optional[str] = None
    user_notes: Optional[str] = None
    video_data: Optional[VideoData] = None
    id: str = field(default_factory=lambda: f"item-{uuid.uuid4().hex}")
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "userId": self.user_id,
            "type": self.type,
            "title": self.title,
            "summary": self.summary,
            "category": self.category,
            "tags": list(self.tags),
            "createdAt": self.created_at.isoformat(),
        }
        optional = {
            "url": self.url,
            "imageUrl": self.image_url,
            "content": self.content,
            "userNotes": self.user_notes,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        if self.video_data is not None:
            data["videoData"] = self.video_data.to_dict()
        return data
