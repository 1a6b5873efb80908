from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class Hotel(BaseModel):
    name: str
    lat: float = Field(allow_inf_nan=False)
    lng: float = Field(allow_inf_nan=False)
    city: Optional[str] = None


class Activity(BaseModel):
    name: str
    type: str = ""
    price: Optional[float] = None
    rating: Optional[float] = None
    lat: float = Field(allow_inf_nan=False)
    lng: float = Field(allow_inf_nan=False)


class Preferences(BaseModel):
    budget: float
    maxDistance: float
    duration: str = ""


class ItineraryRequest(BaseModel):
    mode: Literal["quick", "full"]
    hotel: Hotel
    activities: List[Activity]
    preferences: Preferences


LogLevel = Literal["info", "success", "error"]


class DebugLog(BaseModel):
    """One progress record pushed to debug viewers."""

    timestamp: str = Field(default_factory=lambda: datetime.now().strftime("%H:%M:%S"))
    level: LogLevel = "info"
    message: str

    model_config = {"frozen": True}


class ChunkEvent(BaseModel):
    type: Literal["chunk"] = "chunk"
    content: str


class DoneEvent(BaseModel):
    type: Literal["done"] = "done"
    response: str


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    error: str


class HealthResponse(BaseModel):
    status: str
    gemini: bool
