"""
Geographic payloads.

Bounds are checked by ``services.geo`` rather than by the models so that
out-of-range coordinates produce the same ``InvalidCoordinates`` error
whether they arrive in a search or in a create request.
"""

from pydantic import BaseModel, Field


class Position(BaseModel):
    latitude: float = Field(..., example=46.0667)
    longitude: float = Field(..., example=11.1167)


class PointQuery(BaseModel):
    lat: float
    lng: float


class RadiusQuery(PointQuery):
    rad: float = Field(..., description="Radius in kilometres")
