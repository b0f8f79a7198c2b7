from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from ..pipeline.models import PageMetadata


logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; SmartVault/1.0; +https://smartvault.app)",
}
TIMEOUT = 10
MAX_METADATA_TITLE = 100


def _meta_content(soup: BeautifulSoup, *keys: str) -> Optional[str]:
    """First non-empty ``content`` among meta tags named by ``property`` or ``name``."""
    for key in keys:
        for attr in ("property", "name"):
            tag = soup.find("meta", attrs={attr: key})
            content = (tag.get("content") or "").strip() if tag else ""
            if content:
                return content
    return None


def parse_metadata(html: str, url: str) -> PageMetadata:
    soup = BeautifulSoup(html or "", "html.parser")
    title = _meta_content(soup, "og:title", "twitter:title")
    if not title and soup.title:
        title = soup.title.get_text()
    title = re.sub(r"\s+", " ", title or "").strip() or (urlparse(url).hostname or url)

    image_url = _meta_content(soup, "og:image", "twitter:image", "twitter:image:src")
    if image_url and not image_url.startswith("http"):
        image_url = urljoin(url, image_url)

    return PageMetadata(
        title=title,
        description=_meta_content(soup, "og:description", "twitter:description", "description"),
        image_url=image_url,
    )


def fetch_metadata(url: str) -> PageMetadata:
    try:
        response = requests.get(url, headers=HEADERS, timeout=TIMEOUT, allow_redirects=True)
        response.raise_for_status()
        return parse_metadata(response.text, response.url or url)
    except requests.RequestException as exc:
        logger.warning("[metadata] fetch failed for %s: %s", url, exc)
        return PageMetadata(title=urlparse(url).hostname or url)


def clean_metadata_title(raw_title: str) -> str:
    """Tidy a social-media page title for use as a fallback item title."""
    if not raw_title:
        return ""
    cleaned = re.sub(r"#\w+", "", raw_title).strip()
    # "Someone on Instagram: actual caption"
    cleaned = re.sub(r"^[^:]+:\s*", "", cleaned).strip()
    cleaned = re.sub(r"^[\"']|[\"']$", "", cleaned).strip()
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > MAX_METADATA_TITLE:
        cleaned = cleaned[:MAX_METADATA_TITLE]
        last_space = cleaned.rfind(" ")
        if last_space > MAX_METADATA_TITLE * 0.7:
            cleaned = cleaned[:last_space]
        cleaned = cleaned.strip() + "..."
    return cleaned or "Video"
