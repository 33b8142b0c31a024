from typing import Any


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    log_level: str = 'ERROR'

    def __init__(
        self, message: str, status_code: int, *, context: dict[str, Any] | None = None
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.context: dict[str, Any] = context or {}
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    log_level = 'WARNING'

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, 409, context=context)


class GoneError(CustomBaseError):
    log_level = 'WARNING'

    def __init__(self, message: str) -> None:
        super().__init__(message, 410)


class ContentionError(ConflictError):
    """Expected loss of a race for shared inventory; not a fault."""

    log_level = 'INFO'
