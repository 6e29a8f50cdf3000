"""Recommendation queries for the API layer."""

from .exceptions import JobNotFoundError, NotASeekerError, RecommendationError
from .service import RecommendationService

__all__ = [
    "RecommendationService",
    "RecommendationError",
    "JobNotFoundError",
    "NotASeekerError",
]
