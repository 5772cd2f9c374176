"""Resolution of unknown components: exact-name converters and the generative service."""

from .client import GenerativeClient, GenerativeResponse, GenerativeServiceError, parse_response
from .known_patterns import convert_known_pattern
from .orchestrator import ResolutionOrchestrator, resolve_components

__all__ = [
    "GenerativeClient",
    "GenerativeResponse",
    "GenerativeServiceError",
    "ResolutionOrchestrator",
    "convert_known_pattern",
    "parse_response",
    "resolve_components",
]
