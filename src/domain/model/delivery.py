from dataclasses import dataclass


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of an outbound email or contact-sync request.

    ``exists`` is set when the provider reported the contact was already present,
    which still counts as success.
    """
    success: bool
    id: str | None = None
    error: str | None = None
    exists: bool = False

    @classmethod
    def failed(cls, error: str) -> 'DeliveryResult':
        return cls(success=False, error=error)
