"""
City helpers for the resource directory.
"""

from typing import Optional


def normalize_city_query(city: Optional[str]) -> Optional[str]:
    """
    Canonical form of a user-supplied city filter.

    Trims whitespace. Returns None for missing, empty or whitespace-only
    values, which the directory treats as "no filter".
    """
    if not city or not isinstance(city, str):
        return None
    normalized = " ".join(city.split())
    return normalized or None


def geocode_query(city: str, country: str) -> str:
    """Free-text query sent to the geocoder, e.g. "Pune, India"."""
    return f"{city}, {country}" if country else city


def city_matches(stored_city: Optional[str], query: str) -> bool:
    """
    Case-insensitive substring match of a stored city against the filter.

    "pune" matches "Pune", "Pune Cantonment" and "PUNE".
    """
    if not stored_city or not isinstance(stored_city, str):
        return False
    return query.casefold() in stored_city.casefold()
