"""Common ChronoHatch-specific exceptions."""


class ChronoHatchValueError(ValueError):
    """Raised when ChronoHatch detects invalid user-provided data."""


class BatchNotFoundError(LookupError):
    """Raised when a batch id does not resolve to a stored batch."""

    def __init__(self, batch_id: str) -> None:
        super().__init__(f"Batch '{batch_id}' not found")
        self.batch_id = batch_id


__all__ = ["ChronoHatchValueError", "BatchNotFoundError"]
