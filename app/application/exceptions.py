class PersistenceError(RuntimeError):
    """Raised when an appointment could not be written to durable storage."""
    pass


class SalonConfigError(ValueError):
    """Raised when the salon configuration is missing or fails validation."""
    pass
