"""Client for interacting with NASA's public APIs using an API key."""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

import requests

from orbitwatch.config import get_settings

logger = logging.getLogger(__name__)

BASE_URL = "https://api.nasa.gov"
NEO_URL = f"{BASE_URL}/neo/rest/v1"
MARS_PHOTOS_URL = f"{BASE_URL}/mars-photos/api/v1"
EONET_URL = "https://eonet.gsfc.nasa.gov/api/v3"
IMAGE_LIBRARY_URL = "https://images-api.nasa.gov"

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class NASAAPIError(RuntimeError):
    """Raised when the NASA API returns an error response."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidRequestError(ValueError):
    """Raised when a request is rejected before anything is sent upstream."""


class RoverDateRangeError(InvalidRequestError):
    """Raised when a requested earth date falls outside a rover's photo coverage."""


def is_valid_date(value: Optional[str]) -> bool:
    return bool(value) and DATE_PATTERN.match(value) is not None


class NASAAPIClient:
    """Thin wrapper around NASA APIs that injects the API key and handles errors."""

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[int] = None) -> None:
        settings = get_settings()
        self.api_key = api_key or settings.nasa_api_key or "DEMO_KEY"
        self.timeout = timeout or settings.nasa_api_timeout

    def _request(self, method: str, url: str, with_key: bool = True, **kwargs: Any) -> Dict[str, Any]:
        params = kwargs.pop("params", {})
        if with_key:
            params.setdefault("api_key", self.api_key)
        logger.debug("%s %s params=%s", method, url, {k: v for k, v in params.items() if k != "api_key"})
        response = requests.request(method, url, params=params, timeout=self.timeout, **kwargs)
        if not response.ok:
            raise NASAAPIError(f"NASA API error {response.status_code}: {response.text}", response.status_code)
        return response.json()

    def apod(self, date: Optional[str] = None, **kwargs: Any) -> Dict[str, Any]:
        """Fetch Astronomy Picture of the Day metadata."""
        params = {"date": date} if date else {}
        params.update(kwargs)
        return self._request("GET", f"{BASE_URL}/planetary/apod", params=params)

    def search_images(self, query: str, media_type: Optional[str] = "image", page: int = 1) -> Dict[str, Any]:
        """Query NASA Image and Video Library for imagery metadata."""
        params: Dict[str, Any] = {"q": query, "page": page}
        if media_type:
            params["media_type"] = media_type
        return self._request("GET", f"{IMAGE_LIBRARY_URL}/search", with_key=False, params=params)

    # ------------------------------------------------------------------
    # Near Earth Objects
    # ------------------------------------------------------------------

    def neo_feed(self, start_date: str, end_date: str) -> Dict[str, Any]:
        """Fetch Near Earth Objects approaching between two dates (YYYY-MM-DD)."""
        if not start_date or not end_date:
            raise InvalidRequestError("Both start_date and end_date are required (YYYY-MM-DD format)")
        if not is_valid_date(start_date) or not is_valid_date(end_date):
            raise InvalidRequestError("Invalid date format. Use YYYY-MM-DD")
        params = {"start_date": start_date, "end_date": end_date}
        return self._request("GET", f"{NEO_URL}/feed", params=params)

    def neo_browse(self, page: int = 0, size: int = 20, sort: str = "id") -> Dict[str, Any]:
        """Page through the overall NEO catalogue."""
        params = {"page": page, "size": size, "sort": sort}
        return self._request("GET", f"{NEO_URL}/neo/browse", params=params)

    def neo_by_id(self, neo_id: str) -> Dict[str, Any]:
        """Look up a single NEO, including its full close-approach history."""
        if not neo_id:
            raise InvalidRequestError("NEO ID is required")
        return self._request("GET", f"{NEO_URL}/neo/{neo_id}")

    # ------------------------------------------------------------------
    # EONET (no API key)
    # ------------------------------------------------------------------

    def eonet_events(
        self,
        limit: int = 50,
        days: int = 30,
        status: str = "open",
        category: Optional[str] = None,
        source: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Fetch Earth Observatory Natural Event Tracker events."""
        params: Dict[str, Any] = {"limit": limit, "days": days, "status": status}
        if category:
            params["category"] = category
        if source:
            params["source"] = source
        return self._request("GET", f"{EONET_URL}/events", with_key=False, params=params)

    def eonet_categories(self) -> Dict[str, Any]:
        return self._request("GET", f"{EONET_URL}/categories", with_key=False)

    def eonet_sources(self) -> Dict[str, Any]:
        return self._request("GET", f"{EONET_URL}/sources", with_key=False)

    # ------------------------------------------------------------------
    # Mars rover photos
    # ------------------------------------------------------------------

    def mars_rovers(self) -> Dict[str, Any]:
        return self._request("GET", f"{MARS_PHOTOS_URL}/rovers")

    def mars_manifest(self, rover: str) -> Dict[str, Any]:
        """Return the photo manifest (landing date, max date, cameras) for a rover."""
        data = self._request("GET", f"{MARS_PHOTOS_URL}/manifests/{rover}")
        return data.get("photo_manifest", {})

    def mars_photos(
        self,
        rover: str,
        earth_date: Optional[str] = None,
        camera: Optional[str] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Fetch rover photos, or only the manifest when no photo filter is given.

        An ``earth_date`` outside the manifest's ``landing_date``..``max_date``
        window raises :class:`RoverDateRangeError` without querying photos.
        """
        if not rover:
            raise InvalidRequestError("Rover name is required")

        manifest = self.mars_manifest(rover)
        if not earth_date and not camera and page is None:
            return {"photo_manifest": manifest}

        landing_date = manifest.get("landing_date")
        max_date = manifest.get("max_date")
        if earth_date and landing_date and max_date:
            # ISO dates compare correctly as strings
            if earth_date < landing_date or earth_date > max_date:
                raise RoverDateRangeError(
                    f"Photos for {rover} are only available between {landing_date} and {max_date}."
                )

        params: Dict[str, Any] = {"page": page if page is not None else 1}
        if earth_date:
            params["earth_date"] = earth_date
        if camera:
            params["camera"] = camera
        data = self._request("GET", f"{MARS_PHOTOS_URL}/rovers/{rover}/photos", params=params)
        return {"photos": data.get("photos", [])}

    def mars_sol_photos(self, rover: str = "curiosity", sol: int = 1000) -> Dict[str, Any]:
        """Photos a rover took on one Martian day."""
        return self._request("GET", f"{MARS_PHOTOS_URL}/rovers/{rover}/photos", params={"sol": sol})
