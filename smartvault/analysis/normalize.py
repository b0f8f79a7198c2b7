"""Title, category and summary cleanup applied to every model result."""

from __future__ import annotations

import re
from typing import Optional

from ..pipeline.models import RawVideoAnalysis, VideoAnalysis
from ..utils.text import clean_text, first_sentence


MAX_TITLE_LENGTH = 60
MAX_SUMMARY_LENGTH = 200
MIN_CUT_POSITION = 50
ELLIPSIS = "..."
DEFAULT_TITLE = "Video"
DEFAULT_CATEGORY = "General"
NO_SUMMARY = "No summary available."

FIXED_CATEGORIES = (
    "Technology",
    "Business",
    "Finance",
    "Marketing",
    "Productivity",
    "Self-Improvement",
    "Health",
    "Fitness",
    "Cooking",
    "Design",
    "Creative",
    "AI",
    "Programming",
    "Science",
    "Education",
    "Lifestyle",
)

_EMOJI_RE = re.compile(
    "["
    "\U0001F300-\U0001F9FF"
    "\U0001F600-\U0001F64F"
    "\U0001F680-\U0001F6FF"
    "\u2600-\u26FF"
    "\u2700-\u27BF"
    "]"
)
_MD_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_CATEGORY_STRIP_RE = re.compile(r"[^\w\s-]|_")


def title_case(text: str) -> str:
    # Every token is re-cased, acronyms included ("AI" -> "Ai").
    return " ".join(word[:1].upper() + word[1:].lower() if word else word for word in text.split(" "))


def normalize_title(title: Optional[str]) -> str:
    cleaned = re.sub(r"[#@]", "", title or "")
    cleaned = _EMOJI_RE.sub("", cleaned)
    cleaned = clean_text(cleaned)
    # Re-casing can change the length ("ß" -> "SS"), so case and cut until stable.
    previous = None
    while cleaned != previous:
        previous = cleaned
        cleaned = title_case(cleaned)[:MAX_TITLE_LENGTH].strip()
    return cleaned or DEFAULT_TITLE


def derive_title(raw: RawVideoAnalysis, transcript: str = "") -> str:
    """Pick the best title source before cleanup."""
    if raw.title and raw.title.strip():
        return raw.title
    content = raw.structured_content
    if content.recipe and content.recipe.name:
        return content.recipe.name
    if content.workout and content.workout.name:
        return content.workout.name
    if content.tutorial and content.tutorial.title:
        return content.tutorial.title
    return first_sentence(raw.summary or transcript[:50])


def normalize_category(category: Optional[str]) -> str:
    if not category or not isinstance(category, str):
        return DEFAULT_CATEGORY
    cleaned = _CATEGORY_STRIP_RE.sub("", category.strip())
    words = [title_case(w) for w in cleaned.split() if w][:2]
    cleaned = " ".join(words)
    for fixed in FIXED_CATEGORIES:
        if fixed.lower() == cleaned.lower():
            return fixed
    if len(cleaned) < 2:
        return DEFAULT_CATEGORY
    return cleaned


def strip_markup(text: str) -> str:
    cleaned = _EMOJI_RE.sub("", text)
    cleaned = _MD_LINK_RE.sub(r"\1", cleaned)
    for token in ("**", "*", "__", "_", "`"):
        cleaned = cleaned.replace(token, "")
    return cleaned.strip()


def _repeats_title(summary: str, title: str) -> bool:
    title_lower = title.lower().strip()
    if not title_lower:
        return False
    summary_lower = summary.lower().strip()
    if summary_lower == title_lower:
        return True
    if not summary_lower.startswith(title_lower):
        return False
    rest = summary_lower[len(title_lower):]
    return not rest[:1].isalnum()


def truncate_summary(text: str, limit: int = MAX_SUMMARY_LENGTH) -> str:
    if len(text) <= limit:
        return text
    window = text[:limit]
    sentence_end = max(window.rfind("."), window.rfind("!"), window.rfind("?"))
    if sentence_end > MIN_CUT_POSITION:
        return text[: sentence_end + 1]
    room = limit - len(ELLIPSIS)
    last_space = text[:room].rfind(" ")
    if last_space > MIN_CUT_POSITION:
        return text[:last_space].rstrip() + ELLIPSIS
    return text[:room] + ELLIPSIS


def _summary_from_content(title: str, content: Optional[str]) -> str:
    candidate = clean_text(content or "")[:160].strip()
    if candidate and _repeats_title(candidate, title):
        candidate = candidate[len(title.strip()):].lstrip(" .,:;!?-").strip()
    if candidate and not _repeats_title(candidate, title):
        return candidate
    return f"Information about {title}" if title.strip() else NO_SUMMARY


def normalize_summary(summary: Optional[str], title: str, content: Optional[str] = None) -> str:
    if not summary or not isinstance(summary, str) or not summary.strip():
        cleaned = clean_text(content or title or "")[:160].strip()
    else:
        cleaned = clean_text(strip_markup(summary))
    if not cleaned or _repeats_title(cleaned, title):
        cleaned = _summary_from_content(title, content)
    return truncate_summary(cleaned) or NO_SUMMARY


def normalize_video_analysis(raw: RawVideoAnalysis, transcript: str) -> VideoAnalysis:
    title = normalize_title(derive_title(raw, transcript))
    return VideoAnalysis(
        title=title,
        category=normalize_category(raw.category),
        summary=normalize_summary(raw.summary, title, transcript),
        structured_content=raw.structured_content,
    )
