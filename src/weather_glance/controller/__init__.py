"""Request lifecycle controllers for weather fetch and city search."""

from .fetch import FetchOrchestrator, WeatherState
from .search import GeocodingSearchController, SearchState
from .state import RequestSequencer, RequestState

__all__ = [
    "FetchOrchestrator",
    "GeocodingSearchController",
    "RequestSequencer",
    "RequestState",
    "SearchState",
    "WeatherState",
]
