import re


def clean_text(text: str) -> str:
    cleaned = re.sub(r"\s+", " ", text).strip()
    return cleaned


def first_sentence(text: str) -> str:
    if not text:
        return ""
    return text.split(".")[0].strip()


def preview(text: str, limit: int = 100) -> str:
    text = clean_text(text or "")
    return text if len(text) <= limit else text[:limit] + "..."
