from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from community_events.services.exceptions import PersistenceError


class ErrorCode(str, Enum):
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    EVENT_NOT_PUBLISHED = "EVENT_NOT_PUBLISHED"
    EVENT_CANCELLED = "EVENT_CANCELLED"
    FORM_INVALID = "FORM_INVALID"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    NOT_EVENT_AUTHOR = "NOT_EVENT_AUTHOR"
    ADMIN_ONLY = "ADMIN_ONLY"

    # Structured persistence codes, set by the gateway when the driver exposes them
    DUPLICATE_KEY = "duplicate_key"
    ROW_LEVEL_SECURITY = "row_level_security"
    NETWORK = "network"
    UNKNOWN = "unknown"


class ErrorCategory(str, Enum):
    DUPLICATE_SUBMISSION = "duplicate_submission"
    PERMISSION = "permission"
    NETWORK = "network"
    UNEXPECTED = "unexpected"


_USER_MESSAGES = {
    ErrorCategory.DUPLICATE_SUBMISSION: (
        "It looks like you've already submitted this message recently. "
        "Please wait a moment before submitting again."
    ),
    ErrorCategory.PERMISSION: (
        "There was a permission error. Please refresh the page and try again."
    ),
    ErrorCategory.NETWORK: "Network error. Please check your connection and try again.",
    ErrorCategory.UNEXPECTED: "An unexpected error occurred. Please try again later.",
}

_CODE_CATEGORIES = {
    ErrorCode.DUPLICATE_KEY: ErrorCategory.DUPLICATE_SUBMISSION,
    ErrorCode.ROW_LEVEL_SECURITY: ErrorCategory.PERMISSION,
    ErrorCode.NETWORK: ErrorCategory.NETWORK,
}


def classify_persistence_error(err: PersistenceError) -> ErrorCategory:
    """Map a gateway failure onto one of the four user-facing categories.

    A structured code from the gateway wins. Without one, fall back to matching
    the driver message, which is what the hosted backend gives us today.
    """
    try:
        category = _CODE_CATEGORIES.get(ErrorCode(err.code))
    except ValueError:
        category = None
    if category is not None:
        return category

    message = err.message or ""
    if "duplicate key value" in message:
        return ErrorCategory.DUPLICATE_SUBMISSION
    if "violates row-level security" in message:
        return ErrorCategory.PERMISSION
    if "Network" in message:
        return ErrorCategory.NETWORK
    return ErrorCategory.UNEXPECTED


def user_message(category: ErrorCategory) -> str:
    return _USER_MESSAGES[category]
