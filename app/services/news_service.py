"""
News relay - fetch the government RSS feed and map its newest items.

The feed is downloaded with requests (so the timeout is ours) and parsed
with feedparser.
"""

import html
import logging
import re
from calendar import timegm
from datetime import datetime, timezone
from typing import Dict, List, Optional

import feedparser
import requests

from app.core.errors import NewsUnavailable
from app.core.settings import settings

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")


def plain_text_snippet(markup: Optional[str]) -> str:
    """Strip tags and entities from an item's HTML summary."""
    if not markup:
        return ""
    text = html.unescape(_TAG_RE.sub(" ", markup))
    return " ".join(text.split())


def _entry_time(entry) -> Optional[datetime]:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    return datetime.fromtimestamp(timegm(parsed), tz=timezone.utc)


class NewsService:
    def __init__(self, feed_url: str, source_name: str, timeout: float = 5.0, max_items: int = 10):
        self.feed_url = feed_url
        self.source_name = source_name
        self.timeout = timeout
        self.max_items = max_items

    def fetch(self) -> bytes:
        try:
            resp = requests.get(self.feed_url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"News feed fetch failed: {e}")
            raise NewsUnavailable() from e

        if resp.status_code != 200:
            logger.warning(f"News feed returned status {resp.status_code}")
            raise NewsUnavailable()
        return resp.content

    def latest(self) -> List[Dict]:
        parsed = feedparser.parse(self.fetch())
        if parsed.bozo and not parsed.entries:
            logger.warning(f"News feed could not be parsed: {parsed.get('bozo_exception')}")
            raise NewsUnavailable()

        return [
            {
                "title": (entry.get("title") or "").strip(),
                "content": plain_text_snippet(entry.get("summary") or entry.get("description")),
                "source": self.source_name,
                "time": _entry_time(entry),
            }
            for entry in parsed.entries[: self.max_items]
        ]


_news_service: Optional[NewsService] = None


def get_news_service() -> NewsService:
    global _news_service
    if _news_service is None:
        _news_service = NewsService(
            feed_url=settings.NEWS_FEED_URL,
            source_name=settings.NEWS_SOURCE_NAME,
            timeout=settings.NEWS_TIMEOUT_SECONDS,
            max_items=settings.NEWS_MAX_ITEMS,
        )
    return _news_service
