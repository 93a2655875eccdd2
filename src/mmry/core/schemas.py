"""
Pydantic models for values the cache hands back to callers.
Why: typed, validated snapshot instead of a loose dict.
"""

from pydantic import BaseModel, Field


class CacheStats(BaseModel):
    hits: int = Field(ge=0)
    misses: int = Field(ge=0)
    size: int = Field(ge=0)
