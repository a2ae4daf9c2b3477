# providers/unsplash.py
# Unsplash photo search by text. first hit only, small rendition

import httpx
from typing import Optional
from utils import with_region

UNSPLASH_URL = "https://api.unsplash.com/search/photos"

async def fetch_unsplash(text: str, region: str, access_key: str) -> Optional[str]:
    if not access_key or not text:
        return None
    headers = {
        "Authorization": f"Client-ID {access_key}",
        "Accept-Version": "v1",
        "User-Agent": "GeoPhotoSearch/0.1",
    }
    params = {"query": with_region(text, region), "per_page": 1}
    async with httpx.AsyncClient(timeout=20.0, headers=headers) as client:
        r = await client.get(UNSPLASH_URL, params=params)
        if r.status_code != 200:
            return None
        results = (r.json() or {}).get("results") or []
        if not results:
            return None
        return ((results[0] or {}).get("urls") or {}).get("small")
