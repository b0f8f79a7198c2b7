"""Coerce model-produced detail blocks into well-formed structured content.

The model is asked for a strict schema but routinely returns strings where
lists are expected, free text in numeric fields, or blocks that do not match
the declared ``type``. Everything here is tolerant: bad fields are dropped or
defaulted, never raised.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from ..pipeline.models import (
    CONTENT_TYPES,
    Exercise,
    Recipe,
    StructuredContent,
    Tutorial,
    TutorialStep,
    Workout,
)


_DIGITS_RE = re.compile(r"\d+")


def parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = _DIGITS_RE.search(value)
        if match:
            return int(match.group(0))
    return None


def as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def as_text_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    items = (as_text(v) for v in value)
    return [item for item in items if item]


def _name(value: Any, default: str) -> str:
    return as_text(value) or default


def repair_recipe(data: dict) -> Recipe:
    return Recipe(
        name=_name(data.get("name"), "Untitled Recipe"),
        ingredients=as_text_list(data.get("ingredients")),
        instructions=as_text_list(data.get("instructions")),
        servings=parse_int(data.get("servings")),
        prep_time=as_text(data.get("prepTime")),
        cook_time=as_text(data.get("cookTime")),
    )


def _repair_exercise(entry: Any) -> Optional[Exercise]:
    if isinstance(entry, str):
        entry = {"name": entry}
    if not isinstance(entry, dict):
        return None
    name = as_text(entry.get("name"))
    if not name:
        return None
    return Exercise(
        name=name,
        sets=parse_int(entry.get("sets")),
        reps=as_text(entry.get("reps")),
        duration=as_text(entry.get("duration")),
        rest=as_text(entry.get("rest")),
    )


def repair_workout(data: dict) -> Workout:
    raw_exercises = data.get("exercises")
    exercises = [_repair_exercise(e) for e in raw_exercises] if isinstance(raw_exercises, list) else []
    return Workout(
        name=_name(data.get("name"), "Untitled Workout"),
        exercises=[e for e in exercises if e is not None],
        duration=as_text(data.get("duration")),
        difficulty=as_text(data.get("difficulty")),
    )


def repair_tutorial(data: dict) -> Tutorial:
    steps: list[TutorialStep] = []
    raw_steps = data.get("steps")
    for position, entry in enumerate(raw_steps if isinstance(raw_steps, list) else [], start=1):
        if isinstance(entry, str):
            entry = {"description": entry}
        if not isinstance(entry, dict):
            continue
        description = as_text(entry.get("description"))
        if not description:
            continue
        steps.append(
            TutorialStep(
                step=parse_int(entry.get("step")) or position,
                description=description,
                tips=as_text(entry.get("tips")),
            )
        )
    tools = data.get("tools")
    return Tutorial(
        title=_name(data.get("title"), "Untitled Tutorial"),
        steps=steps,
        tools=as_text_list(tools) if tools is not None else None,
        difficulty=as_text(data.get("difficulty")),
    )


_REPAIRERS = {
    "recipe": repair_recipe,
    "workout": repair_workout,
    "tutorial": repair_tutorial,
}


def repair_structured_content(payload: dict) -> StructuredContent:
    content_type = str(payload.get("type") or "").strip().lower()
    blocks = {name: payload.get(name) for name in _REPAIRERS if isinstance(payload.get(name), dict)}

    if content_type not in CONTENT_TYPES:
        content_type = next(iter(blocks)) if len(blocks) == 1 else "general"
    if content_type == "general" or content_type not in blocks:
        return StructuredContent(type="general")

    detail = _REPAIRERS[content_type](blocks[content_type])
    return StructuredContent(type=content_type, **{content_type: detail})
