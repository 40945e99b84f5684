"""Neighborhood directory schemas."""

from pydantic import BaseModel, ConfigDict


class NeighborhoodResponse(BaseModel):
    id: int
    name: str
    city: str
    district: str
    latitude: float
    longitude: float

    model_config = ConfigDict(from_attributes=True)
