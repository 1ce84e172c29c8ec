"""
Resource directory endpoint - relief and resource centers, optionally by city.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from app.models.base import ErrorResponse
from app.models.resource import ResourceResponse
from app.services.resource_resolver import ResourceResolver, get_resource_resolver
from app.services.response_cache import CachedRoute

router = APIRouter(prefix="/api/resources", tags=["Resources"], route_class=CachedRoute)


@router.get(
    "",
    response_model=List[ResourceResponse],
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def list_resources(
    city: Optional[str] = Query(None, max_length=100, description="City name (optional)"),
    resolver: ResourceResolver = Depends(get_resource_resolver),
):
    """
    Resources for an optional city.

    - No city: up to 100 resources, unfiltered.
    - City: validated against the geocoder first (404 if unknown), then up to
      50 resources whose city contains the filter, case-insensitively.
    """
    return resolver.resolve(city)
