"""
Alert endpoints - public alert feed (cached) and authenticated publishing.
"""

from typing import List
from fastapi import APIRouter, Depends, status

from app.dependencies import require_subject
from app.models.alert import AlertCreate, AlertResponse
from app.services.alert_service import AlertService, get_alert_service
from app.services.response_cache import CachedRoute

cached_router = APIRouter(prefix="/api/alerts", tags=["Alerts"], route_class=CachedRoute)
router = APIRouter(prefix="/api/alerts", tags=["Alerts"])


@cached_router.get("", response_model=List[AlertResponse])
def list_alerts(service: AlertService = Depends(get_alert_service)):
    """Newest 50 alerts, most recent first."""
    return service.latest_alerts()


@router.post("", response_model=AlertResponse, status_code=status.HTTP_201_CREATED)
def publish_alert(
    alert: AlertCreate,
    subject: str = Depends(require_subject),
    service: AlertService = Depends(get_alert_service),
):
    return service.create_alert(title=alert.title, message=alert.message)
