class StoreError(Exception):
    """Base class for failures talking to the document store."""


class NotFoundError(StoreError):
    """The singleton record is missing and must be provisioned out of band."""


class ConflictError(StoreError):
    """Concurrent writers kept winning until the attempt budget ran out."""


class StoreUnavailableError(StoreError):
    """Transport, timeout or service failure reaching the store."""


class ValidationError(Exception):
    """Malformed request body."""
