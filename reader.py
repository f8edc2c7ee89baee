import os
import re

import requests

from errors import RetrievalError

# ---------------- CONFIG ----------------
# Jina Reader fetches the page server-side and returns readable text.
READER_BASE_URL = os.getenv("READER_BASE_URL", "https://r.jina.ai/")
MAX_ARTICLE_CHARS = int(os.getenv("MAX_ARTICLE_CHARS", "15000"))

USER_AGENT = "ArticleSummarizer/1.0"

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def normalize_url(raw_url: str) -> str:
    clean_url = (raw_url or "").strip()
    if not _SCHEME_RE.match(clean_url):
        clean_url = "https://" + clean_url
    return clean_url


def build_reader_url(raw_url: str, base: str | None = None) -> str:
    return (base if base is not None else READER_BASE_URL) + normalize_url(raw_url)


def limit_article_text(text: str, limit: int | None = None) -> str:
    """
    Keep the first `limit` characters so the prompt doesn't get huge.
    Truncating an already truncated text is a no-op.
    """
    if limit is None:
        limit = MAX_ARTICLE_CHARS
    return (text or "")[:limit]


def fetch_article_content(raw_url: str, timeout: float | None = None) -> str:
    """
    One GET through the reader proxy, no retries.
    Returns the body unmodified; callers apply limit_article_text().
    """
    reader_url = build_reader_url(raw_url)
    print(f"[reader] GET {reader_url}")

    try:
        r = requests.get(reader_url, timeout=timeout, headers={"User-Agent": USER_AGENT})
    except requests.RequestException as e:
        print(f"[reader] request failed: {e}")
        raise RetrievalError(
            "Could not reach the article reader service. Check your connection and try again."
        ) from e

    if not 200 <= r.status_code < 300:
        print(f"[reader] status {r.status_code} for {reader_url}")
        raise RetrievalError(
            f"Failed to fetch article content. Status: {r.status_code}. "
            "Some news sites block scraping. Try another link.",
            status_code=r.status_code,
        )

    text = r.text
    print(f"[reader] fetched {len(text)} chars")
    return text
