"""Tests for the news feed relay."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from app.core.errors import NewsUnavailable
from app.main import app
from app.services.news_service import NewsService, get_news_service, plain_text_snippet

FEED_ITEMS = "".join(
    f"""
    <item>
      <title>Press release {i}</title>
      <description>&lt;p&gt;Relief update &lt;b&gt;{i}&lt;/b&gt;&lt;/p&gt;</description>
      <pubDate>Mon, 15 Jul 2024 10:{i:02d}:00 GMT</pubDate>
    </item>"""
    for i in range(12)
)
FEED = f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel><title>PIB</title>{FEED_ITEMS}</channel></rss>
""".encode()


def feed_service():
    return NewsService(feed_url="https://example.test/rss", source_name="PIB India", timeout=1.0, max_items=10)


def test_plain_text_snippet_strips_markup():
    assert plain_text_snippet("<p>Relief  <b>camp</b> &amp; kitchen</p>") == "Relief camp & kitchen"
    assert plain_text_snippet(None) == ""


def test_latest_maps_top_ten_items():
    with patch("app.services.news_service.requests.get", return_value=MagicMock(status_code=200, content=FEED)):
        items = feed_service().latest()

    assert len(items) == 10
    assert items[0]["title"] == "Press release 0"
    assert items[0]["content"] == "Relief update 0"
    assert items[0]["source"] == "PIB India"
    assert items[0]["time"].isoformat() == "2024-07-15T10:00:00+00:00"


def test_fetch_failure_raises_news_unavailable():
    with patch("app.services.news_service.requests.get", side_effect=requests.Timeout("slow")):
        with pytest.raises(NewsUnavailable):
            feed_service().latest()


def test_news_route_error_message(client):
    service = MagicMock()
    service.latest.side_effect = NewsUnavailable()
    app.dependency_overrides[get_news_service] = lambda: service

    resp = client.get("/api/news")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Error fetching news"}


def test_news_route_is_cached(client):
    service = MagicMock()
    service.latest.return_value = [{"title": "t", "content": "c", "source": "PIB India", "time": None}]
    app.dependency_overrides[get_news_service] = lambda: service

    first = client.get("/api/news")
    second = client.get("/api/news")

    assert first.content == second.content
    assert service.latest.call_count == 1
