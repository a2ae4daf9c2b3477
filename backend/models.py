# models.py
# typed request/response models shared by the API and the providers

from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional

Strategy = Literal["first", "nearest"]
ImageSource = Literal["unsplash", "commons"]


class Candidate(BaseModel):
    lat: float
    lng: float
    address: str


class Place(Candidate):
    osm_url: str


class ImageRef(BaseModel):
    # "loading" is client state while the request is in flight, never sent
    status: Literal["found", "notfound"]
    url: Optional[str] = None
    source: ImageSource


class SearchRequest(BaseModel):
    query: str
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    strategy: Strategy = "first"
    image_source: ImageSource = "unsplash"

    @field_validator("query")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("query must not be blank")
        return v


class SearchResponse(BaseModel):
    query: str
    strategy: Strategy
    image_source: ImageSource
    place: Place
    image: ImageRef


class ImageRequest(BaseModel):
    text: Optional[str] = None
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    source: ImageSource = "unsplash"
