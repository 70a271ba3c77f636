from typing import Any

from pydantic import BaseModel


class CacheEntry(BaseModel):
    data: Any
    timestamp: float


class RateLimitEntry(BaseModel):
    count: int
    reset_time: float
