"""Errors raised by the recommendation facade.

Each carries the HTTP status an API layer should answer with.
"""


class RecommendationError(Exception):
    """Base exception for recommendation lookups."""

    status_code = 500


class JobNotFoundError(RecommendationError):
    """The requested job does not exist."""

    status_code = 404


class NotASeekerError(RecommendationError):
    """The user does not exist or is not a job seeker."""

    status_code = 400
