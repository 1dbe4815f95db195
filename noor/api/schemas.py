"""
API Schemas

Response envelopes shared by the content endpoints.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from ..domain.cache.value_objects import CachedStatus, LoadResult, PayloadSource

T = TypeVar("T")


class ContentResponse(BaseModel, Generic[T]):
    """A payload and the tier that served it."""

    data: T
    source: PayloadSource = Field(..., description="network, store or bundled")
    offline: bool = Field(..., description="True when not served from the network")

    @classmethod
    def from_result(cls, result: LoadResult) -> "ContentResponse":
        return cls(data=result.payload, source=result.source, offline=result.is_offline_copy)

    @classmethod
    def from_network(cls, payload) -> "ContentResponse":
        return cls(data=payload, source=PayloadSource.NETWORK, offline=False)


class CachedStatusResponse(BaseModel):
    """Result of a read-only cache probe."""

    cached: bool
    source: str

    @classmethod
    def from_status(cls, status: CachedStatus) -> "CachedStatusResponse":
        return cls(**status.to_dict())
