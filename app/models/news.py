"""
Pydantic models for the relayed government news feed.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class NewsItem(BaseModel):
    title: str
    content: str
    source: str
    time: Optional[datetime] = None
