"""Error taxonomy for the libro resource."""

from collections.abc import Sequence


class LibroApiError(Exception):
    """Base class for every failure the resource handlers know how to map."""

    kind = "error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationFailure(LibroApiError):
    """Rejected input; raised before any storage interaction."""

    kind = "validation_failed"

    def __init__(self, fields: Sequence[str], detail: str | None = None) -> None:
        self.fields = list(fields)
        super().__init__(
            detail or f"Missing or invalid fields: {', '.join(self.fields)}"
        )


class NotFound(LibroApiError):
    """The addressed libro does not exist."""

    kind = "not_found"

    def __init__(self, libro_id: int) -> None:
        self.libro_id = libro_id
        super().__init__(f"Libro {libro_id} not found")


class StorageFailure(LibroApiError):
    """The relational engine failed; ``cause`` is kept for the logs only."""

    kind = "storage_failure"

    def __init__(self, operation: str, cause: BaseException) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"Storage operation '{operation}' failed")


class StartupError(RuntimeError):
    """The application cannot serve requests against its storage backend."""
