"""Job posting use cases."""

from .service import JobPostingService

__all__ = ["JobPostingService"]
