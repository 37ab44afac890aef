from nokanban.core.exceptions.base import AppException


class ResourceNotFoundError(AppException):
    """Raised when a requested board, column or card does not exist."""

    status_code = 404

    def __init__(self, resource: str = "Resource", identifier: str = ""):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} '{identifier}' not found"
        super().__init__(message)


class NameTakenError(AppException):
    """Raised when creating a shared board whose name is already in use."""

    status_code = 409

    def __init__(self, name: str = ""):
        message = "Board name already taken"
        if name:
            message = f"Board name '{name}' already taken"
        super().__init__(message)


class InvalidCredentialError(AppException):
    """Raised when a board PIN is missing or does not match."""

    status_code = 401

    def __init__(self, message: str = "Invalid PIN"):
        super().__init__(message)


class CreationFailedError(AppException):
    """Raised when the store returns no row for an insert."""

    status_code = 500

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"Failed to create {resource.lower()}")


class RateLimitError(AppException):
    """Raised when a client exceeds its request window."""

    status_code = 429

    def __init__(self, retry_after: int | None = None, message: str = "Too many requests"):
        self.retry_after = retry_after
        if retry_after:
            message += f" - retry after {retry_after} seconds"
        super().__init__(message)


class InvalidSnapshotError(AppException):
    """Raised when an imported board export cannot be parsed."""

    status_code = 400

    def __init__(self, message: str = "Invalid board data"):
        super().__init__(message)


class ValidationError(AppException):
    """Raised when input validation fails."""

    status_code = 400

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message)


class BoardServiceConnectionError(AppException):
    """Raised when the shared board service cannot be reached."""

    status_code = 503

    def __init__(self, message: str = "Failed to connect to the board service"):
        super().__init__(message)
