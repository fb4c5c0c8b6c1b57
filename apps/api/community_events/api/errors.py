from fastapi import HTTPException

from community_events.services.error_codes import (
    ErrorCategory,
    classify_persistence_error,
    user_message,
)
from community_events.services.exceptions import (
    ConflictError,
    FormValidationError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    ServiceError,
    ValidationError,
)

_PERSISTENCE_STATUS = {
    ErrorCategory.DUPLICATE_SUBMISSION: 409,
    ErrorCategory.PERMISSION: 403,
    ErrorCategory.NETWORK: 503,
    ErrorCategory.UNEXPECTED: 500,
}


def http_error_from_service(err: ServiceError) -> HTTPException:
    detail: dict = {"code": err.code, "message": err.message}

    if isinstance(err, PersistenceError):
        category = classify_persistence_error(err)
        status = _PERSISTENCE_STATUS[category]
        # The raw driver message stays in the logs, not in the response.
        detail = {"code": category.value, "message": user_message(category)}
    elif isinstance(err, NotFoundError):
        status = 404
    elif isinstance(err, PermissionDeniedError):
        status = 403
    elif isinstance(err, ConflictError):
        status = 409
    elif isinstance(err, ValidationError):
        status = 422
        if isinstance(err, FormValidationError):
            detail["errors"] = err.errors
    else:
        status = 500

    return HTTPException(status_code=status, detail=detail)
