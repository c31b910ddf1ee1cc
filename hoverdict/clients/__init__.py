"""Remote dictionary API clients."""

from .base import DefinitionApiClient
from .types import DefinitionRequest, FetchResult, FetchStatus

__all__ = [
    "DefinitionApiClient",
    "DefinitionRequest",
    "FetchResult",
    "FetchStatus",
]
