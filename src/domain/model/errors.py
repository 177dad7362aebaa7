"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class WebhookVerificationError(DomainError):
    """Inbound webhook signature could not be verified."""


class StatsUnavailableError(DomainError):
    """Statistics page could not be fetched."""

    def __init__(self, code: str, reason: str):
        self.code = code
        self.reason = reason
        super().__init__(f"Failed to scrape Darwinex stats: {reason}")
