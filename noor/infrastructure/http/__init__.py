"""
Remote Content Infrastructure Module

Retrying JSON fetcher and the provider clients built on it.
"""

from .athkar_client import AthkarClient
from .exceptions import (
    FetchConnectionException,
    FetchDecodeException,
    FetchException,
    FetchHTTPStatusException,
    FetchRequestException,
    FetchTimeoutException,
    PayloadShapeException,
    PlaceNotFoundException,
    SourceNotConfiguredException,
)
from .fetcher import RemoteContentFetcher
from .geocoding_client import GeoPlace, NominatimClient
from .prayer_client import AlAdhanClient
from .quran_client import AlQuranCloudClient

__all__ = [
    "AthkarClient",
    "AlAdhanClient",
    "AlQuranCloudClient",
    "GeoPlace",
    "NominatimClient",
    "RemoteContentFetcher",
    "FetchConnectionException",
    "FetchDecodeException",
    "FetchException",
    "FetchHTTPStatusException",
    "FetchRequestException",
    "FetchTimeoutException",
    "PayloadShapeException",
    "PlaceNotFoundException",
    "SourceNotConfiguredException",
]
