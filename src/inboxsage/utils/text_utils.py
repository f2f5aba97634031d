"""Text processing utilities."""

import html
import math
import re
from typing import List, Optional

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 200
MAX_TAGS = 5

# Keyword tags recognized on ingestion
COMMON_TAGS = [
    "ai",
    "technology",
    "crypto",
    "blockchain",
    "web3",
    "startup",
    "business",
    "marketing",
    "design",
    "development",
]

_TAG_RE = re.compile(r"<[^>]*>")
_IMG_SRC_RE = re.compile(r"<img[^>]+src=[\"']([^\"'>]+)[\"']", re.IGNORECASE)


def strip_html(text: Optional[str]) -> str:
    """Remove HTML tags and decode entities.

    Args:
        text: HTML or plain text

    Returns:
        Plain text with surrounding whitespace removed
    """
    if not text:
        return ""
    return html.unescape(_TAG_RE.sub("", text)).strip()


def count_words(text: str) -> int:
    """Count whitespace-separated words in text."""
    return len(text.split())


def estimate_reading_time(content: Optional[str]) -> int:
    """Estimate reading time in minutes.

    Word count of the HTML-stripped text at 200 words per minute,
    rounded up, never less than one minute.
    """
    words = count_words(strip_html(content))
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def extract_excerpt(content: Optional[str], max_length: int = EXCERPT_LENGTH) -> str:
    """Build a plain-text excerpt cut at a word boundary.

    Args:
        content: HTML or plain text
        max_length: Maximum excerpt length before the ellipsis

    Returns:
        Excerpt, with "..." appended when the text was truncated
    """
    clean = strip_html(content)
    if len(clean) <= max_length:
        return clean

    # Drop the trailing partial word
    cut = re.sub(r"\s+\S*$", "", clean[:max_length])
    return cut + "..."


def extract_image_url(content: Optional[str]) -> Optional[str]:
    """Return the src of the first <img> tag in content, if any."""
    if not content:
        return None

    match = _IMG_SRC_RE.search(content)
    return match.group(1) if match else None


def extract_tags(content: Optional[str]) -> List[str]:
    """Extract up to five known keyword tags from content."""
    if not content:
        return []

    lower = strip_html(content).lower()
    tags = [tag for tag in COMMON_TAGS if re.search(rf"\b{re.escape(tag)}\b", lower)]
    return tags[:MAX_TAGS]
