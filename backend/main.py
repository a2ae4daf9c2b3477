# main.py
# FastAPI app exposing POST /search and POST /image for the place search + photo widget

import os
import json
import logging
import asyncio
from typing import Optional
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from models import ImageRef, ImageRequest, Place, SearchRequest, SearchResponse
from utils import TTLCache, osm_link, pick
from providers.geo import search_places
from providers.unsplash import fetch_unsplash
from providers.commons import fetch_commons

load_dotenv()

app = FastAPI(title="Geo Photo Search API", version="0.1.0")

# CORS origins
origins = [o.strip() for o in os.getenv("FRONTEND_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# logging
logging.basicConfig(level=logging.INFO)
log = logging.getLogger("geo-photo")

# config / env
UNSPLASH_ACCESS_KEY = os.getenv("UNSPLASH_ACCESS_KEY", "")
SEARCH_REGION = os.getenv("SEARCH_REGION", "Bangladesh")
DEFAULT_QUERY = os.getenv("DEFAULT_QUERY", "Dhaka University")
GEOCODE_LIMIT = int(os.getenv("GEOCODE_LIMIT", "5"))
COMMONS_RADIUS_M = int(os.getenv("COMMONS_RADIUS_M", "10000"))

# widget map defaults (Dhaka)
DEFAULT_CENTER = {"lat": 23.7806, "lng": 90.2794}
DEFAULT_ZOOM = 13
FLY_TO_ZOOM = 16

# timeouts (seconds)
GEOCODE_TIMEOUT_S = int(os.getenv("GEOCODE_TIMEOUT_S", "10"))
IMAGE_TIMEOUT_S = int(os.getenv("IMAGE_TIMEOUT_S", "12"))

# per process cache (10 mins)
cache = TTLCache(
    ttl_seconds=int(os.getenv("CACHE_TTL_S", "600")),
    maxsize=int(os.getenv("CACHE_MAXSIZE", "256")),
)

# global JSON error handling
# - HTTPException, ours or routing 404/405 -> { "error": <detail> }
# - any other exception -> { "error": "Server error" }
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    log.warning("HTTP %s: %s", exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # log stack once. do not leak details to client
    log.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "Server error"})

# timeout wrapper for providers
# returns (result, errstr) and never raises
async def run_with_timeout(coro, seconds: int, label: str, empty=None):
    try:
        result = await asyncio.wait_for(coro, timeout=seconds)
        return result, None
    except asyncio.TimeoutError:
        msg = f"{label} timed out after {seconds}s"
        log.warning(msg)
        return empty, msg
    except Exception as e:
        msg = f"{label} error: {e}"
        log.warning(msg)
        return empty, msg

async def lookup_image(source: str, text: Optional[str], lat: Optional[float], lng: Optional[float]) -> tuple[ImageRef, Optional[str]]:
    """
    Ask one image provider for a photo. Provider failures are logged and
    reported as "notfound" together with the error string; they never
    fail the caller.
    """
    if source == "commons":
        coro = fetch_commons(lat, lng, COMMONS_RADIUS_M)
    else:
        coro = fetch_unsplash(text or "", SEARCH_REGION, UNSPLASH_ACCESS_KEY)
    url, err = await run_with_timeout(coro, IMAGE_TIMEOUT_S, source)
    if url:
        return ImageRef(status="found", url=url, source=source), None
    if not err:
        log.info("%s: no image for %r", source, text if source == "unsplash" else (lat, lng))
    return ImageRef(status="notfound", source=source), err

@app.post("/search", response_model=SearchResponse)
async def search(req: SearchRequest):
    """
    Geocode the query, pick a candidate (first, or nearest to the user),
    then fetch a photo of the resolved place.
    """
    ref = None
    if req.strategy == "nearest":
        if req.lat is None or req.lng is None:
            raise HTTPException(status_code=400, detail="User location not ready yet.")
        ref = (req.lat, req.lng)

    # "first" ignores the user position, so keep it out of the key
    key_fields = req.model_dump(exclude=None if ref else {"lat", "lng"})
    cache_key = json.dumps(key_fields | {"region": SEARCH_REGION})
    hit = cache.get(cache_key)
    if hit:
        return SearchResponse(**hit)

    candidates, geo_err = await run_with_timeout(
        search_places(req.query, SEARCH_REGION, GEOCODE_LIMIT), GEOCODE_TIMEOUT_S, "geocode", empty=[]
    )
    if geo_err:
        raise HTTPException(status_code=502, detail="Error during search.")
    if not candidates:
        raise HTTPException(status_code=404, detail="No results found.")

    chosen = pick(candidates, req.strategy, ref)
    log.info("search %r: %d candidates, %s -> %s", req.query, len(candidates), req.strategy, chosen.address)

    place = Place(**chosen.model_dump(), osm_url=osm_link(chosen.lat, chosen.lng))
    image, image_err = await lookup_image(req.image_source, place.address, place.lat, place.lng)

    resp = SearchResponse(
        query=req.query,
        strategy=req.strategy,
        image_source=req.image_source,
        place=place,
        image=image,
    ).model_dump()

    # a failed photo lookup may succeed next time
    if not image_err:
        cache.set(cache_key, resp)
    return resp

@app.post("/image", response_model=ImageRef)
async def image(req: ImageRequest):
    """Photo lookup on its own, for refreshing the image without re-geocoding."""
    if req.source == "commons" and (req.lat is None or req.lng is None):
        raise HTTPException(status_code=400, detail="lat and lng are required for commons")
    if req.source == "unsplash" and not (req.text or "").strip():
        raise HTTPException(status_code=400, detail="text is required for unsplash")
    ref, _ = await lookup_image(req.source, (req.text or "").strip(), req.lat, req.lng)
    return ref

@app.get("/defaults")
def defaults():
    return {
        "query": DEFAULT_QUERY,
        "center": DEFAULT_CENTER,
        "zoom": DEFAULT_ZOOM,
        "flyToZoom": FLY_TO_ZOOM,
        "region": SEARCH_REGION,
    }

@app.get("/health")
def health():
    return {"ok": True}
