from __future__ import annotations

from community_events.services.error_codes import ErrorCode


class ServiceError(Exception):
    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        self.message = message or code
        super().__init__(self.message)


class NotFoundError(ServiceError):
    pass


class PermissionDeniedError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class ValidationError(ServiceError):
    pass


class FormValidationError(ValidationError):
    """Raised before any gateway call; carries every violated rule, in check order."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(ErrorCode.FORM_INVALID.value, ", ".join(self.errors))


class PersistenceError(ServiceError):
    def __init__(self, message: str, code: str = ErrorCode.UNKNOWN.value) -> None:
        super().__init__(code, message)
