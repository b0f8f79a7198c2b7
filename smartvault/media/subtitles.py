"""Plain-text recovery from subtitle files written by yt-dlp."""

from __future__ import annotations

import json
import re
from html import unescape
from pathlib import Path
from typing import Iterable, Optional

from ..utils.text import clean_text


SUBTITLE_EXTENSIONS = (".vtt", ".srt", ".json3", ".ttml")
_PREFERRED = (".vtt", ".srt", ".json3")
_TAG_RE = re.compile(r"<[^>]+>")
_VTT_HEADER_PREFIXES = ("WEBVTT", "NOTE", "STYLE", "REGION", "Kind:", "Language:")


def _join_lines(lines: Iterable[str]) -> str:
    kept: list[str] = []
    for line in lines:
        # auto-generated tracks repeat the previous line while scrolling
        if kept and kept[-1] == line:
            continue
        kept.append(line)
    return clean_text(" ".join(kept))


def _strip_markup(line: str) -> str:
    return unescape(_TAG_RE.sub("", line)).strip()


def parse_vtt(content: str) -> str:
    lines: list[str] = []
    in_header_block = False
    for raw in content.splitlines():
        line = raw.strip()
        if not line:
            in_header_block = False
            continue
        if line.startswith(_VTT_HEADER_PREFIXES):
            in_header_block = line.startswith(("NOTE", "STYLE", "REGION"))
            continue
        if in_header_block or "-->" in line or line.isdigit():
            continue
        text = _strip_markup(line)
        if text:
            lines.append(text)
    return _join_lines(lines)


def parse_srt(content: str) -> str:
    lines: list[str] = []
    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.isdigit() or "-->" in line:
            continue
        text = _strip_markup(line)
        if text:
            lines.append(text)
    return _join_lines(lines)


def parse_json3(content: str) -> str:
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return ""
    events = data.get("events") if isinstance(data, dict) else None
    if not isinstance(events, list):
        return ""
    lines: list[str] = []
    for event in events:
        segs = event.get("segs") if isinstance(event, dict) else None
        if not isinstance(segs, list):
            continue
        text = "".join(seg.get("utf8", "") for seg in segs if isinstance(seg, dict))
        text = clean_text(unescape(text))
        if text:
            lines.append(text)
    return _join_lines(lines)


def pick_subtitle_file(files: Iterable[Path]) -> Optional[Path]:
    candidates = sorted(f for f in files if f.suffix.lower() in SUBTITLE_EXTENSIONS)
    for ext in _PREFERRED:
        for path in candidates:
            if path.suffix.lower() == ext:
                return path
    return candidates[0] if candidates else None


def read_subtitle_text(path: Path) -> str:
    content = path.read_text(encoding="utf-8", errors="replace")
    suffix = path.suffix.lower()
    if suffix == ".vtt":
        return parse_vtt(content)
    if suffix == ".srt":
        return parse_srt(content)
    if suffix == ".json3":
        return parse_json3(content)
    # TTML and anything else: drop the markup and keep the words
    return clean_text(unescape(_TAG_RE.sub(" ", content)))
