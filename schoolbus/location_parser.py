"""
Extraction of pickup coordinates from shared Google Maps links.

Parents usually send a student's pickup point as a maps link; this module
turns the common link shapes into a validated (lat, lon) pair.
"""

import logging
import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel, Field

from schoolbus.route_optimizer import coords_valid
from schoolbus.type_defs import Coordinates

logger = logging.getLogger(__name__)

MAPS_DOMAINS = (
    "maps.google.com",
    "www.google.com",
    "google.com",
    "goo.gl",
    "maps.app.goo.gl",
)

_NUMBER = r"(-?\d+(?:\.\d+)?)"
_AT_PATTERN = re.compile(r"@" + _NUMBER + "," + _NUMBER + r"(?:,\d+(?:\.\d+)?z?)?")
_PAIR_PATTERN = re.compile(_NUMBER + "," + _NUMBER)
_SPLIT_PATTERN = re.compile(r"[,\s]+")


class LocationParseResult(BaseModel):
    success: bool = Field(..., description="Coordinates were extracted")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    error: Optional[str] = None

    @property
    def coordinates(self) -> Optional[Coordinates]:
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)


def _failure(message: str) -> LocationParseResult:
    return LocationParseResult(success=False, error=message)


def is_maps_host(hostname: str) -> bool:
    hostname = (hostname or "").lower()
    return any(hostname == domain or hostname.endswith("." + domain) for domain in MAPS_DOMAINS)


def parse_coordinate_string(text: str) -> Optional[Coordinates]:
    """Parse ``"lat,lng"`` or ``"lat lng"``."""
    parts = [p for p in _SPLIT_PATTERN.split(text.strip()) if p]
    if len(parts) < 2:
        return None
    try:
        return (float(parts[0]), float(parts[1]))
    except ValueError:
        return None


def _extract_coordinates(url) -> Optional[Coordinates]:
    query = parse_qs(url.query)

    for param in ("q", "ll"):
        for value in query.get(param, []):
            coords = parse_coordinate_string(value)
            if coords:
                return coords

    # /@lat,lng,zoom and /maps/place/<name>/@lat,lng
    match = _AT_PATTERN.search(url.path)
    if match:
        return (float(match.group(1)), float(match.group(2)))

    if url.fragment:
        match = _PAIR_PATTERN.search(url.fragment)
        if match:
            return (float(match.group(1)), float(match.group(2)))

    return None


def parse_location_link(link: str) -> LocationParseResult:
    """
    Extract coordinates from a Google Maps link.

    Supported shapes:
        https://maps.google.com?q=lat,lng
        https://maps.google.com/maps?ll=lat,lng
        https://www.google.com/maps/@lat,lng,zoom
        https://www.google.com/maps/place/Name/@lat,lng,zoom
        coordinates in the hash fragment

    Shortened goo.gl links need resolving first and are rejected.
    """
    clean = (link or "").strip()
    if not clean:
        return _failure("Invalid URL format")

    try:
        url = urlparse(clean)
        hostname = url.hostname
    except ValueError as exc:
        return _failure(f"Failed to parse URL: {exc}")

    if url.scheme not in ("http", "https") or not hostname:
        return _failure("Invalid URL format")

    if not is_maps_host(hostname):
        return _failure("URL must be from Google Maps (maps.google.com, goo.gl, or maps.app.goo.gl)")

    if "goo.gl" in hostname:
        return _failure("Shortened URLs are not supported yet. Please use the full Google Maps URL.")

    coords = _extract_coordinates(url)
    if coords is None:
        logger.debug(f"No coordinates found in link: {clean}")
        return _failure(
            "Could not extract coordinates from the URL. "
            "Make sure it's a direct location link from Google Maps."
        )

    latitude, longitude = coords
    if not coords_valid(latitude, longitude):
        return _failure(
            "Invalid coordinate values. Latitude must be between -90 and 90, "
            "longitude between -180 and 180."
        )

    return LocationParseResult(success=True, latitude=latitude, longitude=longitude)


def format_coordinates(latitude: float, longitude: float, precision: int = 6) -> str:
    return f"{latitude:.{precision}f}, {longitude:.{precision}f}"


def create_maps_url(latitude: float, longitude: float) -> str:
    return f"https://maps.google.com?q={latitude},{longitude}"
