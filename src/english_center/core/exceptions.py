class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 500


class ValidationError(DomainError):
    """Raised when input data is missing a required field or has the wrong type."""

    status_code = 400


class InvalidReferenceError(DomainError):
    """Raised when a foreign key in the payload does not resolve."""

    status_code = 400


class NotFoundError(DomainError):
    """Raised when the target entity of a read/update/delete does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when a uniqueness rule or a referential dependency blocks the write."""

    status_code = 409


class DuplicateEnrollmentError(ConflictError):
    """Raised when a student already holds an enrollment for the class."""


class PersistenceError(DomainError):
    """Raised for any other storage failure (timeouts included)."""

    status_code = 500


class StorageUnavailableError(PersistenceError):
    """Raised when the database refuses or drops the connection."""

    status_code = 503
