# utils.py
# Helpers: haversine distance, candidate picking, OSM links, simple in-memory TTL cache

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple
from models import Candidate
import math
import time

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in kilometers between two lat/lon points."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def nearest(ref: Tuple[float, float], candidates: List[Candidate]) -> Optional[Candidate]:
    """
    Return the candidate closest to ref (lat, lng) by great-circle distance.
    Ties keep the first-seen candidate. None for an empty list.
    """
    best: Optional[Candidate] = None
    best_dist = math.inf
    for c in candidates:
        d = haversine_km(ref[0], ref[1], c.lat, c.lng)
        if d < best_dist:
            best_dist = d
            best = c
    return best


def pick(candidates: List[Candidate], strategy: str, ref: Optional[Tuple[float, float]] = None) -> Optional[Candidate]:
    """Choose one geocoding candidate: the first one, or the nearest to ref."""
    if not candidates:
        return None
    if strategy == "nearest":
        if ref is None:
            raise ValueError("nearest strategy needs a reference point")
        return nearest(ref, candidates)
    return candidates[0]


def osm_link(lat: float, lng: float) -> str:
    return f"https://www.openstreetmap.org/?mlat={lat}&mlon={lng}#map=18/{lat}/{lng}"


def with_region(text: str, region: str) -> str:
    # "Dhaka University" + "Bangladesh" -> "Dhaka University Bangladesh"
    region = (region or "").strip()
    return f"{text} {region}" if region else text


@dataclass
class CacheEntry:
    expires: float
    data: dict


class TTLCache:
    """
    Simple in-memory TTL cache (per-process).
    Expired entries are purged on every write; past maxsize the oldest
    entry is evicted.
    """

    def __init__(self, ttl_seconds: int = 600, maxsize: int = 256):
        self.ttl = ttl_seconds
        self.maxsize = maxsize
        self._store: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._store)

    def get(self, key: str) -> dict | None:
        entry = self._store.get(key)
        if not entry:
            return None
        if entry.expires <= time.time():
            self._store.pop(key, None)
            return None
        return entry.data

    def set(self, key: str, value: dict) -> None:
        now = time.time()
        self._purge(now)
        self._store.pop(key, None)
        while self._store and len(self._store) >= self.maxsize:
            # dicts keep insertion order, so the first key is the oldest
            self._store.pop(next(iter(self._store)))
        self._store[key] = CacheEntry(expires=now + self.ttl, data=value)

    def _purge(self, now: float) -> None:
        for k in [k for k, e in self._store.items() if e.expires <= now]:
            del self._store[k]

    def clear(self) -> None:
        self._store.clear()
