"""
News endpoint - relays the government RSS feed.
"""

from typing import List
from fastapi import APIRouter, Depends

from app.models.news import NewsItem
from app.services.news_service import NewsService, get_news_service
from app.services.response_cache import CachedRoute

router = APIRouter(prefix="/api/news", tags=["News"], route_class=CachedRoute)


@router.get("", response_model=List[NewsItem])
def latest_news(service: NewsService = Depends(get_news_service)):
    """Top 10 items from the feed."""
    return service.latest()
