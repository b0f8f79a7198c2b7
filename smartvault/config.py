import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


load_dotenv()

DEFAULT_CHAT_MODELS = ("gpt-4o-mini", "gpt-4-turbo", "gpt-3.5-turbo")


@dataclass(frozen=True)
class Settings:
    api_key: str
    base_url: Optional[str] = None
    chat_models: tuple[str, ...] = DEFAULT_CHAT_MODELS
    transcribe_model: str = "whisper-1"
    transcribe_language: str = "en"
    llm_timeout: float = 60.0
    caption_timeout: float = 30.0
    audio_timeout: float = 120.0
    ytdlp_path: str = ""
    tmp_dir: Optional[str] = None


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _get_models(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, "")
    models = tuple(m.strip() for m in raw.split(",") if m.strip())
    return models or DEFAULT_CHAT_MODELS


def get_settings() -> Settings:
    api_key = os.getenv("OPENAI_API_KEY", "").strip()
    if not api_key:
        raise ValueError("Missing OPENAI_API_KEY in environment or .env")
    return Settings(
        api_key=api_key,
        base_url=os.getenv("OPENAI_BASE_URL", "").strip() or None,
        chat_models=_get_models("CHAT_MODELS"),
        transcribe_model=os.getenv("TRANSCRIBE_MODEL", "whisper-1"),
        transcribe_language=os.getenv("TRANSCRIBE_LANGUAGE", "en"),
        llm_timeout=_get_float("LLM_TIMEOUT", 60.0),
        caption_timeout=_get_float("CAPTION_TIMEOUT", 30.0),
        audio_timeout=_get_float("AUDIO_TIMEOUT", 120.0),
        ytdlp_path=os.getenv("YTDLP_PATH", "").strip(),
        tmp_dir=os.getenv("SMARTVAULT_TMP_DIR", "").strip() or None,
    )
