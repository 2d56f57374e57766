"""Engine components wiring fetch → parse → dedup → sample → export."""

from .collector import ResultCollector
from .dedup import dedupe
from .fetcher import (
    BodyError,
    FetchError,
    FetchResult,
    Fetcher,
    NetworkError,
    StatusError,
    build_client,
)
from .parser import KeyParser, extract_keys
from .sampler import SampleResult, Sampler
from .thread_pool import ThreadPoolManager

__all__ = [
    "BodyError",
    "FetchError",
    "FetchResult",
    "Fetcher",
    "KeyParser",
    "NetworkError",
    "ResultCollector",
    "SampleResult",
    "Sampler",
    "StatusError",
    "ThreadPoolManager",
    "build_client",
    "dedupe",
    "extract_keys",
]
