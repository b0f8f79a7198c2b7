"""yt-dlp command line driver for captions and audio."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from .base import MediaExtractionError, MediaExtractor
from .subtitles import SUBTITLE_EXTENSIONS, pick_subtitle_file, read_subtitle_text
from ..pipeline.models import AudioClip
from ..utils.file import unique_token, workdir


logger = logging.getLogger(__name__)

MIN_CAPTION_LENGTH = 50
CAPTION_LANGS = "en,en-US,en-GB"
# explicit m4a first, then whatever audio-only stream exists
AUDIO_FORMAT_SELECTORS = ("bestaudio[ext=m4a]", "bestaudio[ext=webm]/bestaudio")
AUDIO_EXTENSIONS = ("m4a", "webm", "opus", "ogg", "mp3")
CANDIDATE_PATHS = (
    "/usr/bin/yt-dlp",
    "/usr/local/bin/yt-dlp",
    "/opt/homebrew/bin/yt-dlp",
    "~/.local/bin/yt-dlp",
)
_STDERR_TAIL = 500


def _summarize(stderr: str | bytes | None) -> str:
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    stderr = (stderr or "").strip()
    return stderr[-_STDERR_TAIL:]


def audio_format_for(path: Path) -> str:
    ext = path.suffix.lstrip(".").lower()
    return ext if ext in AUDIO_EXTENSIONS else "m4a"


class YtDlpExtractor(MediaExtractor):
    def __init__(
        self,
        binary: str = "",
        caption_timeout: float = 30.0,
        audio_timeout: float = 120.0,
        tmp_root: str | None = None,
        candidates: Sequence[str] = CANDIDATE_PATHS,
    ) -> None:
        self.binary = binary
        self.caption_timeout = caption_timeout
        self.audio_timeout = audio_timeout
        self.tmp_root = tmp_root
        self.candidates = tuple(candidates)
        self._resolved: str | None = None

    def locate(self) -> str:
        if self._resolved:
            return self._resolved
        probes = [self.binary] if self.binary else []
        probes.append("yt-dlp")
        probes.extend(self.candidates)
        for probe in probes:
            path = os.path.expanduser(probe)
            found = shutil.which(path)
            if found:
                self._resolved = found
                logger.debug("[yt-dlp] using %s", found)
                return found
        raise MediaExtractionError(
            "yt-dlp not found. Install yt-dlp or set YTDLP_PATH."
        )

    def _run(self, args: list[str], timeout: float) -> subprocess.CompletedProcess:
        command = [self.locate(), *args]
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise MediaExtractionError(
                f"yt-dlp timed out after {timeout:.0f}s",
                stderr=_summarize(exc.stderr),
            ) from exc
        except OSError as exc:
            raise MediaExtractionError(f"yt-dlp could not be started: {exc}") from exc
        if result.returncode != 0:
            stderr = _summarize(result.stderr)
            raise MediaExtractionError(
                f"yt-dlp exited with code {result.returncode}: {stderr or 'no output'}",
                returncode=result.returncode,
                stderr=stderr,
            )
        return result

    def extract_captions(self, url: str) -> Optional[str]:
        logger.info("[captions] probing %s", url)
        with workdir("captions", self.tmp_root) as tmp:
            template = str(tmp / f"captions-{unique_token()}.%(ext)s")
            try:
                self._run(
                    [
                        "--no-check-certificate",
                        "--write-auto-sub",
                        "--write-sub",
                        "--sub-lang",
                        CAPTION_LANGS,
                        "--skip-download",
                        "-o",
                        template,
                        url,
                    ],
                    timeout=self.caption_timeout,
                )
            except MediaExtractionError as exc:
                logger.info("[captions] unavailable: %s", exc)
                return None

            files = [p for p in tmp.iterdir() if p.suffix.lower() in SUBTITLE_EXTENSIONS]
            subtitle = pick_subtitle_file(files)
            if subtitle is None:
                logger.info("[captions] no subtitle file produced")
                return None
            text = read_subtitle_text(subtitle)

        if len(text) <= MIN_CAPTION_LENGTH:
            logger.info("[captions] too short (%d chars)", len(text))
            return None
        logger.info("[captions] extracted %d chars from %s", len(text), subtitle.name)
        return text

    def _find_audio(self, tmp: Path, prefix: str) -> Optional[Path]:
        for ext in AUDIO_EXTENSIONS:
            expected = tmp / f"{prefix}.{ext}"
            if expected.exists():
                return expected
        matches = sorted(
            p for p in tmp.iterdir()
            if p.name.startswith(prefix) and p.is_file() and not p.name.endswith(".part")
        )
        return matches[0] if matches else None

    def extract_audio(self, url: str) -> AudioClip:
        logger.info("[audio] extracting from %s", url)
        with workdir("audio", self.tmp_root) as tmp:
            prefix = f"audio-{unique_token()}"
            template = str(tmp / f"{prefix}.%(ext)s")
            last_error: MediaExtractionError | None = None
            for selector in AUDIO_FORMAT_SELECTORS:
                try:
                    self._run(
                        ["--no-check-certificate", "-f", selector, "-o", template, url],
                        timeout=self.audio_timeout,
                    )
                    last_error = None
                    break
                except MediaExtractionError as exc:
                    logger.warning("[audio] format %s failed: %s", selector, exc)
                    last_error = exc
            if last_error is not None:
                raise MediaExtractionError(
                    f"Failed to extract audio: {last_error}",
                    returncode=last_error.returncode,
                    stderr=last_error.stderr,
                ) from last_error

            audio_path = self._find_audio(tmp, prefix)
            if audio_path is None:
                raise MediaExtractionError("Audio file not found after extraction")
            data = audio_path.read_bytes()
            audio_format = audio_format_for(audio_path)

        if not data:
            raise MediaExtractionError("Extracted audio file is empty")
        logger.info("[audio] extracted %d bytes, format=%s", len(data), audio_format)
        return AudioClip(data=data, format=audio_format)
