# providers/geo.py
# nominatim geocoding (read-only, no key). returns every candidate so callers can pick one

import os
import httpx
from typing import List
from models import Candidate
from utils import with_region

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"

def _headers() -> dict:
    # usage policy: identify the app and give a contact (url or email)
    contact = os.getenv("NOMINATIM_CONTACT", "")
    return {
        "User-Agent": f"GeoPhotoSearch/0.1 ({contact})" if contact else "GeoPhotoSearch/0.1",
        "Accept-Language": "en",
        "Accept": "application/json",
    }

async def search_places(q: str, region: str = "", limit: int = 5) -> List[Candidate]:
    params = {
        "format": "json",
        "q": with_region(q, region),
        "limit": limit,
        "addressdetails": 1,
    }
    async with httpx.AsyncClient(timeout=20.0, headers=_headers()) as client:
        r = await client.get(NOMINATIM_URL, params=params)
        # 429 / 5xx must surface as an error, not as "no results"
        r.raise_for_status()
        data = r.json()
        if not data:
            return []
        out: List[Candidate] = []
        for place in data:
            try:
                lat = float(place["lat"])
                lng = float(place["lon"])
            except (KeyError, TypeError, ValueError):
                continue
            out.append(Candidate(lat=lat, lng=lng, address=place.get("display_name") or ""))
        return out
