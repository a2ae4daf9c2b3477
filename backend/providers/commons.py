# providers/commons.py
# Wikimedia Commons geosearch: files (namespace 6) photographed near a coordinate

import httpx
from typing import Optional

COMMONS_API = "https://commons.wikimedia.org/w/api.php"

HEADERS = {
    "User-Agent": "GeoPhotoSearch/0.1",
    "Accept": "application/json",
}

async def fetch_commons(lat: float, lng: float, radius_m: int = 10000, thumb_width: int = 640) -> Optional[str]:
    params = {
        "action": "query",
        "format": "json",
        "generator": "geosearch",
        "ggscoord": f"{lat}|{lng}",
        "ggsradius": min(max(radius_m, 10), 10000),  # API allows 10..10000
        "ggsnamespace": 6,
        "ggslimit": 10,
        "prop": "imageinfo",
        "iiprop": "url",
        "iiurlwidth": thumb_width,
    }
    async with httpx.AsyncClient(timeout=20.0, headers=HEADERS) as client:
        r = await client.get(COMMONS_API, params=params)
        if r.status_code != 200:
            return None
        pages = ((r.json() or {}).get("query") or {}).get("pages") or {}
        # pages is keyed by page id; geosearch order lives in "index"
        ordered = sorted(pages.values(), key=lambda p: p.get("index", 0))
        for page in ordered:
            info = (page.get("imageinfo") or [None])[0] or {}
            url = info.get("thumburl") or info.get("url")
            if url:
                return url
        return None
